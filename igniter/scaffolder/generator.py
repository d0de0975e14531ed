"""Feature scaffolding orchestrator.

Takes a model name, compiles its fields from the Prisma schema (or from
``name:type`` pairs when the schema has no such model) and generates a
feature directory::

    src/features/<name>/
        index.ts
        <name>.interface.ts
        controllers/<name>.controller.ts
        procedures/<name>.procedure.ts
        presentation/{components,hooks,contexts,utils}/.gitkeep
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import TemplateError
from pydantic import BaseModel, Field

from igniter.config import Config
from igniter.schema import (
    FieldRecord,
    SchemaCompiler,
    compile_model,
    compile_reserved_fields,
    default_reserved_fields,
    fallback_fields,
    normalize_fields,
)
from igniter.utils import ensure_dir, write_file

from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

FEATURE_TEMPLATES: dict[str, str] = {
    "feature/index.ts.j2": "index.ts",
    "feature/interface.ts.j2": "{{ name|lower }}.interface.ts",
    "feature/controller.ts.j2": "controllers/{{ name|lower }}.controller.ts",
    "feature/procedure.ts.j2": "procedures/{{ name|lower }}.procedure.ts",
}

PRESENTATION_DIRS: list[str] = ["components", "hooks", "contexts", "utils"]
FEATURE_DIRS: list[str] = ["controllers", "procedures"]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class FieldSource(str, Enum):
    """Where a feature's fields came from."""
    SCHEMA = "schema"
    FALLBACK = "fallback"
    NONE = "none"


class FeatureGenerationError(Exception):
    """Raised when a feature's files cannot be rendered or written."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"Feature {name}: {message}")


class FeatureResult(BaseModel):
    """Outcome of generating one feature."""

    name: str
    path: Path
    files: list[Path] = Field(default_factory=list)
    field_count: int = 0
    field_source: FieldSource = FieldSource.NONE


class BatchResult(BaseModel):
    """Outcome of generating several features in one run."""

    generated: list[FeatureResult] = Field(default_factory=list)
    failed: dict[str, str] = Field(
        default_factory=dict, description="Model name -> error message"
    )

    @property
    def total(self) -> int:
        return len(self.generated) + len(self.failed)

    @property
    def succeeded(self) -> bool:
        return not self.failed


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class FeatureGenerator:
    """Generates feature directories from schema models."""

    def __init__(
        self,
        config: Config,
        renderer: TemplateRenderer | None = None,
        compiler: SchemaCompiler | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self.compiler = compiler or SchemaCompiler.from_config(config)

    # -- Public API --------------------------------------------------------

    def resolve_fields(
        self,
        name: str,
        fallback: Iterable[str] | None = None,
        schema_text: str | None = None,
    ) -> tuple[list[FieldRecord], FieldSource]:
        """Return the fields for feature *name* and where they came from.

        Schema fields win; ``name:type`` *fallback* pairs are used only when
        the schema yields nothing.  Schema fields are normalized once more
        here, which is safe because normalization is idempotent.

        Raises:
            SchemaNotFoundError: If *schema_text* is not given and the schema
                file is absent.
        """
        if schema_text is None:
            fields = self.compiler.get_model_fields(name)
        else:
            fields = compile_model(schema_text, name, self.compiler.settings)

        if fields:
            return normalize_fields(fields), FieldSource.SCHEMA

        pairs = list(fallback or [])
        if pairs:
            return fallback_fields(pairs), FieldSource.FALLBACK
        return [], FieldSource.NONE

    def resolve_reserved_fields(
        self, name: str, source: FieldSource, schema_text: str
    ) -> list[FieldRecord]:
        """Return the auto-managed fields typed in the entity interface.

        Schema models contribute their declared reserved fields; other
        features get the configured names with default types.
        """
        if source is FieldSource.SCHEMA:
            return compile_reserved_fields(schema_text, name, self.compiler.settings)
        return default_reserved_fields(self.compiler.settings)

    async def generate(
        self,
        name: str,
        fallback: Iterable[str] | None = None,
        *,
        schema_text: str | None = None,
    ) -> FeatureResult:
        """Generate the feature directory for *name*.

        Args:
            name: Model / feature name, e.g. ``"Post"``.
            fallback: ``name:type`` pairs used when the schema has no fields
                for *name*.
            schema_text: Already-loaded schema text; the file is read when
                omitted.

        Returns:
            A ``FeatureResult`` listing the written files.

        Raises:
            SchemaNotFoundError: If the schema file is absent.
            FeatureGenerationError: If a template fails or a file cannot be
                written.
        """
        if schema_text is None:
            schema_text = self.compiler.get_schema_content()
        fields, source = self.resolve_fields(name, fallback, schema_text)
        managed = self.resolve_reserved_fields(name, source, schema_text)
        feature_path = self.config.features_path / name.lower()
        context = self._build_context(name, fields, managed)

        try:
            await self._create_directory_structure(feature_path)
            files = await self._render_feature_files(feature_path, context)
        except (OSError, TemplateError) as exc:
            raise FeatureGenerationError(name, str(exc)) from exc

        return FeatureResult(
            name=name,
            path=feature_path,
            files=files,
            field_count=len(fields),
            field_source=source,
        )

    async def generate_all(
        self,
        models: Iterable[str],
        on_progress: Callable[[str, bool], None] | None = None,
    ) -> BatchResult:
        """Generate a feature for every model in *models*.

        The schema is read once for the whole batch.  A failing model is
        recorded in ``BatchResult.failed`` and does not stop the others.

        Args:
            models: Model names to generate.
            on_progress: Optional callback invoked as ``(model, ok)`` after
                each model.

        Raises:
            SchemaNotFoundError: If the schema file is absent.
        """
        schema_text = self.compiler.get_schema_content()
        result = BatchResult()

        for model in models:
            try:
                feature = await self.generate(model, schema_text=schema_text)
            except FeatureGenerationError as exc:
                result.failed[model] = str(exc)
                ok = False
            else:
                result.generated.append(feature)
                ok = True
            if on_progress is not None:
                on_progress(model, ok)

        return result

    # -- Internal helpers --------------------------------------------------

    def _build_context(
        self, name: str, fields: list[FieldRecord], managed: list[FieldRecord]
    ) -> dict[str, Any]:
        return {
            "name": name,
            "fields": [field.model_dump(mode="json") for field in fields],
            "managed_fields": [field.model_dump(mode="json") for field in managed],
            "primary_key": self.compiler.settings.primary_key,
        }

    async def _create_directory_structure(self, feature_path: Path) -> None:
        presentation = feature_path / "presentation"
        for directory in PRESENTATION_DIRS:
            await asyncio.to_thread(write_file, presentation / directory / ".gitkeep", "")
        for directory in FEATURE_DIRS:
            await asyncio.to_thread(ensure_dir, feature_path / directory)

    async def _render_feature_files(
        self, feature_path: Path, context: dict[str, Any]
    ) -> list[Path]:
        written: list[Path] = []
        for template, target in FEATURE_TEMPLATES.items():
            relative = self.renderer.render_string(target, context)
            path = await self.renderer.render_to_file(
                template, feature_path / relative, context
            )
            written.append(path)
        return written
