"""Document-wide facts the field classifier needs.

Classifying a single field line depends on the rest of the schema: whether its
type names a declared ``enum`` or ``model``, and which UUID version the schema
defaults to.  ``SchemaIndex`` scans the text once and hands those facts to the
classifier as an explicit, immutable value.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field

from .locator import list_models, strip_comment

_ENUM_BLOCK_PATTERN = re.compile(r"\benum\s+(\w+)\s*\{([^}]*)\}")
_UUID_DEFAULT_PATTERN = re.compile(r"@default\(\s*uuid\(\s*(\d+)?\s*\)\s*\)")
_VALUE_ANNOTATION_PATTERN = re.compile(r"\s+@")
_QUOTES = re.compile(r"['\"]")


def decode_enum_value(raw: str) -> str:
    """Turn one enum body line into its literal value.

    HTML entities are decoded first (``R&amp;D`` -> ``R&D``), then any
    value-level annotation such as ``@map("x")`` is dropped and quotes are
    stripped.
    """
    value = html.unescape(raw.strip())
    value = _VALUE_ANNOTATION_PATTERN.split(value, maxsplit=1)[0]
    return _QUOTES.sub("", value).strip()


def parse_enum_values(body: str) -> list[str]:
    """Return the decoded literals of an enum body in declaration order.

    Unquoted lines holding several identifiers (``enum Role { A B }``) yield
    one literal per identifier.
    """
    values: list[str] = []
    for raw_line in body.splitlines():
        line = strip_comment(raw_line.strip())
        if not line or line.startswith("@@"):
            continue
        value = decode_enum_value(line)
        if not value:
            continue
        if _QUOTES.search(line) is None:
            values.extend(value.split())
        else:
            values.append(value)
    return values


@dataclass(frozen=True)
class SchemaIndex:
    """Pre-scanned names and enum literals of one schema document."""

    models: frozenset[str] = frozenset()
    enums: dict[str, tuple[str, ...]] = field(default_factory=dict)
    uuid_version: str | None = None

    @classmethod
    def from_text(cls, schema_text: str) -> "SchemaIndex":
        enums: dict[str, tuple[str, ...]] = {}
        for match in _ENUM_BLOCK_PATTERN.finditer(schema_text):
            enums.setdefault(match.group(1), tuple(parse_enum_values(match.group(2))))

        uuid_match = _UUID_DEFAULT_PATTERN.search(schema_text)
        uuid_version = (uuid_match.group(1) or "4") if uuid_match else None

        return cls(
            models=frozenset(list_models(schema_text)),
            enums=enums,
            uuid_version=uuid_version,
        )

    def is_enum(self, type_name: str) -> bool:
        return type_name in self.enums

    def is_model(self, type_name: str) -> bool:
        return type_name in self.models

    def enum_values(self, type_name: str) -> tuple[str, ...]:
        return self.enums.get(type_name, ())
