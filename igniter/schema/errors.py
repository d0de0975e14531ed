"""Exceptions raised by the schema compiler."""

from __future__ import annotations

from pathlib import Path


class SchemaError(Exception):
    """Base class for schema compiler errors."""


class SchemaNotFoundError(SchemaError):
    """Raised when the Prisma schema file does not exist at call time."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Prisma schema file not found: {path}")


class MalformedRelationError(SchemaError):
    """Raised when a ``@relation(...)`` annotation cannot be decomposed.

    The classifier catches this and emits the field without relation
    metadata.
    """
