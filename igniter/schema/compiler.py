"""Schema compiler facade.

``SchemaCompiler`` answers the three questions the rest of Igniter asks about
the Prisma schema: what is its raw text, does model X exist, and what are the
fields of model X.  Every call reloads the schema file.  Callers that compile
many models in a row should read the text once and use :func:`compile_model`.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from igniter.config import Config, SchemaSettings

from . import locator
from .classifier import classify_line, normalize_field
from .index import SchemaIndex
from .loader import SchemaLoader
from .models import FieldRecord
from .type_mapper import map_type


# ---------------------------------------------------------------------------
# Pure compilation
# ---------------------------------------------------------------------------

def compile_model(
    schema_text: str,
    model_name: str,
    settings: SchemaSettings | None = None,
) -> list[FieldRecord]:
    """Compile the fields of *model_name* from already-loaded schema text.

    Returns an empty list when the model is not declared.  Unparsable lines
    and reserved fields are left out; when a name repeats, the first
    declaration wins.
    """
    body = locator.extract_model_body(schema_text, model_name)
    if body is None:
        return []

    index = SchemaIndex.from_text(schema_text)
    records: list[FieldRecord] = []
    seen: set[str] = set()

    for line in locator.iter_field_lines(body):
        record = classify_line(line, index, settings)
        if record is None:
            continue
        if record.name in seen:
            logger.debug("Dropping duplicate field {}.{}", model_name, record.name)
            continue
        seen.add(record.name)
        records.append(record)

    return records


def normalize_fields(records: Iterable[FieldRecord]) -> list[FieldRecord]:
    """Apply :func:`normalize_field` to every record."""
    return [normalize_field(record) for record in records]


def fallback_fields(pairs: Iterable[str]) -> list[FieldRecord]:
    """Build minimal string-typed fields from ``name:type`` pairs.

    Used when the schema has no model for a feature.  A pair without a type
    defaults to ``String``; empty names are ignored.
    """
    records: list[FieldRecord] = []
    seen: set[str] = set()
    for pair in pairs:
        name, _, field_type = pair.partition(":")
        name = name.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        records.append(
            FieldRecord(
                name=name,
                type=field_type.strip() or "String",
                zod_type="z.string()",
                description=f"{name} field",
            )
        )
    return records


def compile_reserved_fields(
    schema_text: str,
    model_name: str,
    settings: SchemaSettings | None = None,
) -> list[FieldRecord]:
    """Compile only the reserved fields of *model_name*.

    These are the auto-managed fields :func:`compile_model` leaves out
    (``settings.reserved_fields``), in declaration order.  Generated entity
    interfaces use them to type the primary key and timestamps.
    """
    settings = settings or SchemaSettings()
    unfiltered = settings.model_copy(update={"reserved_fields": []})
    return [
        record
        for record in compile_model(schema_text, model_name, unfiltered)
        if record.name in settings.reserved_fields
    ]


def default_reserved_fields(settings: SchemaSettings | None = None) -> list[FieldRecord]:
    """Reserved fields assumed for a feature whose model is not in the schema.

    The primary key and other names are strings, except names ending in
    ``At`` which are timestamps.
    """
    settings = settings or SchemaSettings()
    records: list[FieldRecord] = []
    for name in dict.fromkeys(settings.reserved_fields):
        field_type = "DateTime" if name != settings.primary_key and name.endswith("At") else "String"
        records.append(
            FieldRecord(
                name=name,
                type=field_type,
                zod_type=map_type(field_type),
                description=f"{name} field",
            )
        )
    return records


# ---------------------------------------------------------------------------
# Compiler bound to a schema file
# ---------------------------------------------------------------------------

class SchemaCompiler:
    """Compiles models of the schema file at ``<base_path>/<settings.path>``."""

    def __init__(
        self,
        base_path: str | Path = ".",
        settings: SchemaSettings | None = None,
    ) -> None:
        self.settings = settings or SchemaSettings()
        self.loader = SchemaLoader(base_path, self.settings.path)

    @classmethod
    def from_config(cls, config: Config) -> "SchemaCompiler":
        return cls(config.base_path, config.prisma)

    @property
    def schema_path(self) -> Path:
        return self.loader.path

    def get_schema_content(self) -> str:
        """Return the raw schema text.

        Raises:
            SchemaNotFoundError: If the schema file is absent.
        """
        return self.loader.load_raw()

    def has_model(self, name: str) -> bool:
        """Return ``True`` if model *name* is declared (case-insensitive)."""
        return locator.has_model(self.loader.load_raw(), name)

    def list_models(self) -> list[str]:
        """Return every declared model name in declaration order."""
        return locator.list_models(self.loader.load_raw())

    def get_model_fields(self, name: str) -> list[FieldRecord]:
        """Return the compiled fields of model *name* (empty if undeclared)."""
        return compile_model(self.loader.load_raw(), name, self.settings)
