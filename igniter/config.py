"""Igniter configuration.

Centralised, typed configuration for the schema compiler, the feature
scaffolder and the analyzer.  All settings use Pydantic v2 models so they can
be validated at construction time and serialised to/from JSON or environment
variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class SchemaSettings(BaseModel):
    """Where the Prisma schema lives and which naming conventions it follows."""

    path: str = Field(
        default="prisma/schema.prisma",
        description="Schema file location, relative to the project base path",
    )
    primary_key: str = Field(
        default="id", description="Referenced key used for implicit relations"
    )
    foreign_key_suffix: str = Field(
        default="Id", description="Suffix appended to a field name to form its foreign key"
    )
    reserved_fields: list[str] = Field(
        default=["id", "createdAt", "updatedAt"],
        description="Auto-managed fields that never appear in compiled output",
    )


class AnalyzeSettings(BaseModel):
    """Thresholds used by ``igniter analyze``."""

    complex_model_threshold: int = Field(
        default=3, ge=0, description="Models with more relations than this are flagged"
    )
    required_feature_dirs: list[str] = Field(
        default=["controllers", "procedures"],
        description="Sub-directories every generated feature is expected to have",
    )


class Config(BaseModel):
    """Global Igniter configuration.

    Instances are typically created once by the CLI entry point and then
    passed to the compiler, the feature generator and the analyzer.
    """

    base_path: Path = Field(default=Path("."))
    features_dir: str = Field(default="src/features")
    api_dir: str = Field(default="src/app/api")
    build_dir: str = Field(default=".next/static")
    prisma: SchemaSettings = Field(default_factory=SchemaSettings)
    analyze: AnalyzeSettings = Field(default_factory=AnalyzeSettings)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def schema_path(self) -> Path:
        """Absolute location of ``schema.prisma``."""
        return self.base_path / self.prisma.path

    @property
    def features_path(self) -> Path:
        """Root directory that holds one sub-directory per feature."""
        return self.base_path / self.features_dir

    @property
    def api_path(self) -> Path:
        """Next.js API route directory scanned by the analyzer."""
        return self.base_path / self.api_dir

    @property
    def build_path(self) -> Path:
        """Static build output measured for bundle size."""
        return self.base_path / self.build_dir

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to ``<base_path>/igniter.json``.

        Returns:
            The path where the file was written.
        """
        target = path or (self.base_path / "igniter.json")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            IGNITER_BASE_PATH, IGNITER_SCHEMA_PATH, IGNITER_FEATURES_DIR,
            IGNITER_RESERVED_FIELDS (comma-separated),
            IGNITER_COMPLEX_MODEL_THRESHOLD.
        """
        schema_kwargs: dict[str, Any] = {}
        if os.environ.get("IGNITER_SCHEMA_PATH"):
            schema_kwargs["path"] = os.environ["IGNITER_SCHEMA_PATH"]
        if os.environ.get("IGNITER_RESERVED_FIELDS"):
            schema_kwargs["reserved_fields"] = [
                name.strip()
                for name in os.environ["IGNITER_RESERVED_FIELDS"].split(",")
                if name.strip()
            ]

        analyze_kwargs: dict[str, Any] = {}
        if os.environ.get("IGNITER_COMPLEX_MODEL_THRESHOLD"):
            analyze_kwargs["complex_model_threshold"] = int(
                os.environ["IGNITER_COMPLEX_MODEL_THRESHOLD"]
            )

        return cls(
            base_path=Path(os.environ.get("IGNITER_BASE_PATH", ".")),
            features_dir=os.environ.get("IGNITER_FEATURES_DIR", "src/features"),
            prisma=SchemaSettings(**schema_kwargs),
            analyze=AnalyzeSettings(**analyze_kwargs),
        )
