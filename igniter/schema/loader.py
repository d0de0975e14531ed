"""Reads the Prisma schema file from disk.

Nothing is cached: every public compiler call reloads the file so that a
schema edited by hand between two commands is always picked up.
"""

from __future__ import annotations

from pathlib import Path

from .errors import SchemaNotFoundError

DEFAULT_SCHEMA_PATH = "prisma/schema.prisma"


class SchemaLoader:
    """Loads raw schema text from ``<base_path>/<schema_path>``."""

    def __init__(
        self,
        base_path: str | Path = ".",
        schema_path: str = DEFAULT_SCHEMA_PATH,
    ) -> None:
        self.path = Path(base_path) / schema_path

    def exists(self) -> bool:
        return self.path.is_file()

    def load_raw(self) -> str:
        """Return the full schema text.

        Raises:
            SchemaNotFoundError: If the schema file is absent.
        """
        if not self.exists():
            raise SchemaNotFoundError(self.path)
        return self.path.read_text(encoding="utf-8")
