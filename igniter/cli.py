"""Igniter command-line interface.

Usage::

    igniter generate feature --name Post
    igniter generate feature --name Note --fields title:string body:string
    igniter generate feature                  # every model in the schema
    igniter generate feature --models Post User
    igniter analyze [--json]
    igniter models
    igniter fields Post [--json]
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger
from rich.table import Table

from igniter import __version__
from igniter.analyzer import ProjectAnalyzer, render_report
from igniter.config import Config
from igniter.scaffolder import FeatureGenerationError, FeatureGenerator, FieldSource
from igniter.schema import FieldRecord, SchemaCompiler, SchemaNotFoundError, compile_model
from igniter.schema.locator import list_models
from igniter.utils import (
    console,
    create_progress,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def configure_logging(verbose: bool) -> None:
    """Route ``igniter`` debug diagnostics to stderr when *verbose* is set."""
    if not verbose:
        logger.disable("igniter")
        return
    logger.remove()
    logger.add(sys.stderr, level="DEBUG", format="<level>{level: <8}</level> {message}")
    logger.enable("igniter")


def load_config(args: argparse.Namespace) -> Config:
    """Build the configuration from ``--config``, the environment and ``--base-path``."""
    config = Config.load(Path(args.config)) if args.config else Config.from_env()
    if args.base_path:
        config.base_path = Path(args.base_path)
    return config


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _generate_one(generator: FeatureGenerator, name: str, fields: list[str]) -> int:
    console.print(f"\n[bold cyan]Generating feature: [white]{name}[/white][/bold cyan]\n")
    result = asyncio.run(generator.generate(name, fields))

    if result.field_source is FieldSource.SCHEMA:
        console.print(f"Parsed {result.field_count} fields from schema model {name}")
    elif result.field_source is FieldSource.FALLBACK:
        console.print(f"Model {name} not in schema; using {result.field_count} provided fields")
    else:
        print_warning(f"No fields found for {name}; generated an empty feature.")

    for path in result.files:
        console.print(f"  [dim]created[/dim] {path}")
    print_success(f"\nFeature {name} generated successfully!")
    return 0


def _generate_all(
    generator: FeatureGenerator, compiler: SchemaCompiler, selected: list[str] | None
) -> int:
    models = compiler.list_models()
    if not models:
        print_warning("No models found in your Prisma schema.")
        console.print("[dim]Tip: add some models to your schema.prisma file first.[/dim]")
        return 0

    if selected:
        lookup = {model.lower(): model for model in models}
        unknown = [name for name in selected if name.lower() not in lookup]
        for name in unknown:
            print_warning(f"Model {name} is not declared in the schema; skipping.")
        models = [lookup[name.lower()] for name in selected if name.lower() in lookup]
        if not models:
            console.print("[dim]No models selected. Operation cancelled.[/dim]")
            return 0

    console.print("\n[bold cyan]Generating features for Prisma models[/bold cyan]\n")
    with create_progress() as progress:
        task = progress.add_task("Generating features", total=len(models))

        def _advance(model: str, ok: bool) -> None:
            mark = "[green]done[/green]" if ok else "[red]failed[/red]"
            progress.console.print(f"  {model}: {mark}")
            progress.advance(task)

        batch = asyncio.run(generator.generate_all(models, on_progress=_advance))

    print_summary_table(
        {
            "Generated": f"{len(batch.generated)}/{batch.total}",
            "Failed": str(len(batch.failed)),
        },
        title="Generation Summary",
    )
    for model, error in batch.failed.items():
        print_error(f"  - {model}: {error}")

    if batch.succeeded:
        print_success("All features generated successfully!")
        return 0
    print_warning("Some features could not be generated. Check the errors above.")
    return 1


def cmd_generate(args: argparse.Namespace, config: Config) -> int:
    compiler = SchemaCompiler.from_config(config)
    generator = FeatureGenerator(config, compiler=compiler)
    try:
        if args.name:
            return _generate_one(generator, args.name, args.fields or [])
        return _generate_all(generator, compiler, args.models)
    except SchemaNotFoundError as exc:
        print_error(f"Error: {exc}")
        return 1
    except FeatureGenerationError as exc:
        print_error(f"Feature generation failed: {exc}")
        return 1


def cmd_analyze(args: argparse.Namespace, config: Config) -> int:
    analyzer = ProjectAnalyzer(config)
    try:
        with console.status("Analyzing project structure"):
            report = asyncio.run(analyzer.analyze())
    except SchemaNotFoundError as exc:
        print_error(f"Analysis failed: {exc}")
        return 1

    if args.json:
        console.print_json(report.model_dump_json())
    else:
        render_report(report)
    return 0


def cmd_models(args: argparse.Namespace, config: Config) -> int:
    compiler = SchemaCompiler.from_config(config)
    try:
        schema_text = compiler.get_schema_content()
    except SchemaNotFoundError as exc:
        print_error(f"Error: {exc}")
        return 1

    table = Table(title="Schema Models", header_style="bold cyan")
    table.add_column("Model")
    table.add_column("Fields", justify="right")
    for model in list_models(schema_text):
        fields = compile_model(schema_text, model, compiler.settings)
        table.add_row(model, str(len(fields)))
    console.print(table)
    return 0


def _flags(field: FieldRecord) -> str:
    flags = [
        label
        for label, enabled in (
            ("optional", field.is_optional),
            ("list", field.is_list),
            ("default", field.has_default),
            ("enum", field.is_enum),
        )
        if enabled
    ]
    return ", ".join(flags)


def _relation_label(field: FieldRecord) -> str:
    if field.relation is None:
        return ""
    target = field.relation.model or "?"
    return f"{field.relation.type.value} -> {target}"


def cmd_fields(args: argparse.Namespace, config: Config) -> int:
    compiler = SchemaCompiler.from_config(config)
    try:
        if not compiler.has_model(args.model):
            print_warning(f"Model {args.model} is not declared in the schema.")
            return 1
        fields = compiler.get_model_fields(args.model)
    except SchemaNotFoundError as exc:
        print_error(f"Error: {exc}")
        return 1

    if args.json:
        console.print_json(data=[field.model_dump(mode="json") for field in fields])
        return 0

    table = Table(title=f"{args.model} fields", header_style="bold cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Zod")
    table.add_column("Flags")
    table.add_column("Relation")
    for field in fields:
        table.add_row(field.name, field.type, field.zod_type, _flags(field), _relation_label(field))
    console.print(table)
    console.print(f"{len(fields)} fields extracted")
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="igniter",
        description="Feature-first code generator driven by your Prisma schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  igniter generate feature --name Post\n"
            "  igniter generate feature --name Note --fields title:string body:string\n"
            "  igniter analyze --json\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--base-path", default=None, help="Project root (default: current directory)"
    )
    parser.add_argument("--config", default=None, help="Path to an igniter.json config file")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Print parser diagnostics to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", aliases=["g"], help="Generate code")
    generate_sub = generate.add_subparsers(dest="target", required=True)
    feature = generate_sub.add_parser("feature", help="Generate a feature from a schema model")
    feature.add_argument("--name", "-n", default=None, help="Feature / model name")
    feature.add_argument(
        "--fields", "-f", nargs="+", default=None,
        help="Fallback fields (format: name:type) when the model is not in the schema",
    )
    feature.add_argument(
        "--models", "-m", nargs="+", default=None,
        help="Without --name: only generate these models",
    )
    feature.set_defaults(handler=cmd_generate)

    analyze = subparsers.add_parser("analyze", help="Analyze your project")
    analyze.add_argument("--json", action="store_true", help="Print the report as JSON")
    analyze.set_defaults(handler=cmd_analyze)

    models = subparsers.add_parser("models", help="List schema models")
    models.set_defaults(handler=cmd_models)

    fields = subparsers.add_parser("fields", help="Show the compiled fields of a model")
    fields.add_argument("model", help="Model name")
    fields.add_argument("--json", action="store_true", help="Print the fields as JSON")
    fields.set_defaults(handler=cmd_fields)

    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, dispatch to the selected command and return its exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    config = load_config(args)
    return args.handler(args, config)


def main() -> None:
    """CLI entry point for ``igniter`` and ``python -m igniter``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
