"""Project analysis for ``igniter analyze``.

Collects four groups of facts about a generated project:

* schema -- model count, relation fields, models with many relations;
* features -- generated feature directories, missing sub-directories, size;
* dependencies -- outdated npm packages (``npm outdated --json``);
* performance -- API route count and static bundle size.
"""

from __future__ import annotations

import json

from loguru import logger
from pydantic import BaseModel, Field
from rich.tree import Tree

from igniter.config import Config
from igniter.schema import SchemaCompiler, compile_model
from igniter.schema.locator import list_models
from igniter.utils import console, format_size_kb, iter_files, print_warning, run_command


# ---------------------------------------------------------------------------
# Report models
# ---------------------------------------------------------------------------


class SchemaStats(BaseModel):
    models: int = 0
    fields: int = 0
    relations: int = 0
    complex_models: list[str] = Field(default_factory=list)


class FeatureStats(BaseModel):
    count: int = 0
    incomplete: list[str] = Field(default_factory=list)
    complexity: dict[str, int] = Field(
        default_factory=dict, description="Feature name -> total line count"
    )


class DependencyStats(BaseModel):
    outdated: list[str] = Field(default_factory=list)


class PerformanceStats(BaseModel):
    api_endpoints: int = 0
    bundle_size: str = "0KB"


class AnalyzeReport(BaseModel):
    """Everything ``igniter analyze`` reports."""

    schema_stats: SchemaStats = Field(default_factory=SchemaStats)
    features: FeatureStats = Field(default_factory=FeatureStats)
    dependencies: DependencyStats = Field(default_factory=DependencyStats)
    performance: PerformanceStats = Field(default_factory=PerformanceStats)

    @property
    def has_recommendations(self) -> bool:
        return bool(
            self.schema_stats.complex_models
            or self.features.incomplete
            or self.dependencies.outdated
        )


# ---------------------------------------------------------------------------
# Analyzer
# ---------------------------------------------------------------------------


class ProjectAnalyzer:
    """Analyzes the project rooted at ``config.base_path``."""

    def __init__(self, config: Config, compiler: SchemaCompiler | None = None) -> None:
        self.config = config
        self.compiler = compiler or SchemaCompiler.from_config(config)

    async def analyze(self) -> AnalyzeReport:
        """Run every analysis step.

        Raises:
            SchemaNotFoundError: If the schema file is absent.
        """
        return AnalyzeReport(
            schema_stats=self.analyze_schema(),
            features=self.analyze_features(),
            dependencies=await self.analyze_dependencies(),
            performance=self.analyze_performance(),
        )

    def analyze_schema(self) -> SchemaStats:
        """Count models and relation fields; flag relation-heavy models."""
        schema_text = self.compiler.get_schema_content()
        threshold = self.config.analyze.complex_model_threshold
        stats = SchemaStats()

        for model in list_models(schema_text):
            fields = compile_model(schema_text, model, self.compiler.settings)
            relations = sum(1 for field in fields if field.is_relation)
            stats.models += 1
            stats.fields += len(fields)
            stats.relations += relations
            if relations > threshold:
                stats.complex_models.append(model)

        return stats

    def analyze_features(self) -> FeatureStats:
        """Inspect every directory under the features path."""
        stats = FeatureStats()
        root = self.config.features_path
        if not root.is_dir():
            return stats

        required = self.config.analyze.required_feature_dirs
        for feature in sorted(p for p in root.iterdir() if p.is_dir()):
            stats.count += 1
            if not all((feature / directory).is_dir() for directory in required):
                stats.incomplete.append(feature.name)
            stats.complexity[feature.name] = sum(
                len(path.read_text(encoding="utf-8", errors="replace").splitlines())
                for path in iter_files(feature)
            )

        return stats

    async def analyze_dependencies(self) -> DependencyStats:
        """List outdated npm packages.

        ``npm outdated`` exits non-zero when something is outdated, so the
        JSON on stdout is parsed regardless of the return code.
        """
        returncode, stdout, stderr = await run_command(
            ["npm", "outdated", "--json"], cwd=self.config.base_path
        )
        if not stdout:
            if returncode != 0:
                logger.debug("npm outdated failed ({}): {}", returncode, stderr)
            return DependencyStats()

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError:
            logger.debug("npm outdated returned non-JSON output")
            return DependencyStats()

        if not isinstance(data, dict):
            return DependencyStats()
        return DependencyStats(outdated=list(data))

    def analyze_performance(self) -> PerformanceStats:
        """Count API route handlers and measure the static bundle."""
        api_files = iter_files(self.config.api_path)
        build_files = iter_files(self.config.build_path)
        return PerformanceStats(
            api_endpoints=sum(1 for path in api_files if path.name == "route.ts"),
            bundle_size=format_size_kb(sum(path.stat().st_size for path in build_files)),
        )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _joined(items: list[str]) -> str:
    return ", ".join(items)


def render_report(report: AnalyzeReport) -> None:
    """Print the report as a Rich tree, followed by a hint when needed."""
    schema = report.schema_stats
    tree = Tree("[bold]Project Analysis[/bold]")

    schema_branch = tree.add("[bold cyan]Schema Analysis[/bold cyan]")
    schema_branch.add(f"Models: {schema.models}")
    schema_branch.add(f"Fields: {schema.fields}")
    schema_branch.add(f"Relations: {schema.relations}")
    schema_branch.add(
        f"Complex Models: {_joined(schema.complex_models)}"
        if schema.complex_models
        else "No complex models found"
    )

    features_branch = tree.add("[bold cyan]Features Analysis[/bold cyan]")
    features_branch.add(f"Total Features: {report.features.count}")
    features_branch.add(
        f"Incomplete Features: {_joined(report.features.incomplete)}"
        if report.features.incomplete
        else "All features are complete"
    )

    deps_branch = tree.add("[bold cyan]Dependencies Analysis[/bold cyan]")
    deps_branch.add(
        f"Outdated: {_joined(report.dependencies.outdated)}"
        if report.dependencies.outdated
        else "All dependencies are up to date"
    )

    perf_branch = tree.add("[bold cyan]Performance Analysis[/bold cyan]")
    perf_branch.add(f"API Endpoints: {report.performance.api_endpoints}")
    perf_branch.add(f"Bundle Size: {report.performance.bundle_size}")

    console.print()
    console.print(tree)
    console.print()

    if report.has_recommendations:
        print_warning(
            "Recommendations found: split complex models, regenerate incomplete "
            "features and update outdated dependencies."
        )
