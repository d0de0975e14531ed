"""Relation detection for schema fields.

Handles both explicit ``@relation(...)`` annotations and implicit relations,
where a field's type simply names another declared model.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from .errors import MalformedRelationError
from .index import SchemaIndex
from .locator import matching_paren
from .models import RelationInfo, RelationType

_RELATION_TOKEN = re.compile(r"@relation\b")
_KEYWORD_ARGUMENT = re.compile(r"^(\w+)\s*:\s*(.*)$", re.DOTALL)


# ---------------------------------------------------------------------------
# Annotation parsing
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RelationAnnotation:
    """Arguments of one ``@relation(...)`` annotation."""

    name: str | None = None
    fields: tuple[str, ...] = ()
    references: tuple[str, ...] = ()

    @property
    def has_keys(self) -> bool:
        return bool(self.fields) and bool(self.references)


def _split_top_level(arguments: str) -> list[str]:
    """Split on commas that are not nested in brackets, parens or strings."""
    parts: list[str] = []
    depth = 0
    in_string = False
    current: list[str] = []
    for char in arguments:
        if char == '"':
            in_string = not in_string
        elif not in_string and char in "[(":
            depth += 1
        elif not in_string and char in "])":
            depth -= 1
        if char == "," and depth == 0 and not in_string:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [part for part in parts if part]


def _unquote(value: str) -> str:
    return value.strip().strip("\"'")


def _parse_key_list(key: str, value: str) -> tuple[str, ...]:
    value = value.strip()
    if not (value.startswith("[") and value.endswith("]")):
        raise MalformedRelationError(f"'{key}' must be a bracketed list, got {value!r}")
    items = [item.strip() for item in value[1:-1].split(",") if item.strip()]
    if not items:
        raise MalformedRelationError(f"'{key}' list is empty")
    return tuple(items)


def parse_relation_annotation(tail: str) -> RelationAnnotation | None:
    """Parse the ``@relation`` annotation found in a field's annotation tail.

    Args:
        tail: Everything after the field's type and modifier.

    Returns:
        The parsed annotation, or ``None`` if the tail has no ``@relation``.

    Raises:
        MalformedRelationError: If the arguments cannot be decomposed into a
            field list and a reference list.
    """
    match = _RELATION_TOKEN.search(tail)
    if match is None:
        return None

    rest = tail[match.end():]
    if not rest.startswith("("):
        return RelationAnnotation()

    close = matching_paren(tail, match.end())
    if close is None:
        raise MalformedRelationError(f"Unbalanced parentheses in {rest!r}")
    arguments = tail[match.end() + 1 : close]
    name: str | None = None
    fields: tuple[str, ...] = ()
    references: tuple[str, ...] = ()
    seen_keys: set[str] = set()

    for position, argument in enumerate(_split_top_level(arguments)):
        keyword = _KEYWORD_ARGUMENT.match(argument)
        if keyword is None:
            if position == 0 and argument.startswith('"'):
                name = _unquote(argument)
                continue
            raise MalformedRelationError(f"Unexpected relation argument {argument!r}")

        key, value = keyword.group(1), keyword.group(2)
        seen_keys.add(key)
        if key == "name":
            name = _unquote(value)
        elif key == "fields":
            fields = _parse_key_list(key, value)
        elif key == "references":
            references = _parse_key_list(key, value)

    if ("fields" in seen_keys) != ("references" in seen_keys):
        raise MalformedRelationError("'fields' and 'references' must be given together")

    return RelationAnnotation(name=name or None, fields=fields, references=references)


# ---------------------------------------------------------------------------
# Cardinality & target inference
# ---------------------------------------------------------------------------

def relation_cardinality(
    fields: Sequence[str], references: Sequence[str], is_list: bool
) -> RelationType:
    """Classify a relation.

    Multi-column keys win over the list marker: more than one entry on either
    side is many-to-many.
    """
    if len(fields) > 1 or len(references) > 1:
        return RelationType.MANY_TO_MANY
    if is_list:
        return RelationType.ONE_TO_MANY
    return RelationType.ONE_TO_ONE


def infer_model_from_foreign_key(foreign_key: str, suffix: str = "Id") -> str:
    """Guess a model name from a foreign key (``authorId`` -> ``Author``).

    Returns an empty string when the key does not follow the convention.
    """
    if not suffix or not foreign_key.endswith(suffix) or len(foreign_key) <= len(suffix):
        return ""
    stem = foreign_key[: -len(suffix)]
    return stem[0].upper() + stem[1:]


def resolve_target_model(
    source_type: str,
    annotation: RelationAnnotation,
    index: SchemaIndex,
    suffix: str = "Id",
) -> str:
    """Pick the relation's target model, or ``""`` if it stays unknown."""
    if index.is_model(source_type):
        return source_type
    if annotation.name:
        return annotation.name
    if annotation.fields:
        inferred = infer_model_from_foreign_key(annotation.fields[0], suffix)
        if inferred:
            return inferred
    logger.debug("Could not resolve relation target for type {}", source_type)
    return ""


def build_relation(
    field_name: str,
    source_type: str,
    is_list: bool,
    annotation: RelationAnnotation | None,
    index: SchemaIndex,
    primary_key: str = "id",
    foreign_key_suffix: str = "Id",
) -> RelationInfo | None:
    """Return relation metadata for a field, or ``None`` if it is not a relation.

    An annotation carrying ``fields``/``references`` is used as written.
    Otherwise, if the type names a declared model, an implicit relation is
    synthesized: ``fields=[<field>Id]`` and ``references=[id]``.
    """
    if annotation is not None and annotation.has_keys:
        return RelationInfo(
            type=relation_cardinality(annotation.fields, annotation.references, is_list),
            model=resolve_target_model(source_type, annotation, index, foreign_key_suffix),
            fields=annotation.fields,
            references=annotation.references,
            name=annotation.name,
        )

    if not index.is_model(source_type):
        return None

    fields = (f"{field_name}{foreign_key_suffix}",)
    references = (primary_key,)
    return RelationInfo(
        type=relation_cardinality(fields, references, is_list),
        model=source_type,
        fields=fields,
        references=references,
        name=annotation.name if annotation is not None else None,
    )
