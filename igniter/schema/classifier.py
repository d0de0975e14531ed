"""Classifies one field line of a model body into a ``FieldRecord``.

A field line has the shape ``<name> <Type>[?|[]] [@annotations...]``.  Lines
that do not fit are dropped rather than raised: one field the classifier
cannot model must never block the rest of the model.
"""

from __future__ import annotations

import re

from loguru import logger

from igniter.config import SchemaSettings

from .errors import MalformedRelationError
from .index import SchemaIndex
from .models import LIST_CARDINALITIES, FieldRecord
from .relations import build_relation, parse_relation_annotation
from .type_mapper import map_type

_FIELD_PATTERN = re.compile(
    r"^(?P<name>\w+)\s+(?P<type>\w+)(?P<modifier>\?|\[\])?(?:\s*(?P<tail>@.*))?$"
)
_DEFAULT_TOKEN = re.compile(r"@default\b")

OPTIONAL_MARKER = "?"
LIST_MARKER = "[]"


def normalize_field(record: FieldRecord) -> FieldRecord:
    """Re-derive ``is_relation``, ``is_list`` and ``is_optional``.

    The rules only ever turn flags on, so applying this any number of times
    gives the same result as applying it once.
    """
    is_relation = record.is_relation or record.relation is not None
    is_list = record.is_list or (
        record.relation is not None and record.relation.type in LIST_CARDINALITIES
    )
    is_optional = record.is_optional or record.has_default

    if (is_relation, is_list, is_optional) == (
        record.is_relation,
        record.is_list,
        record.is_optional,
    ):
        return record
    return record.model_copy(
        update={"is_relation": is_relation, "is_list": is_list, "is_optional": is_optional}
    )


def classify_line(
    line: str,
    index: SchemaIndex,
    settings: SchemaSettings | None = None,
) -> FieldRecord | None:
    """Turn a trimmed field line into a normalized ``FieldRecord``.

    Args:
        line: One non-empty line of a model body, comments already removed.
        index: Enum/model names of the whole document.
        settings: Naming conventions; defaults to ``SchemaSettings()``.

    Returns:
        The field record, or ``None`` for unparsable lines and reserved
        field names.
    """
    settings = settings or SchemaSettings()
    match = _FIELD_PATTERN.match(line.strip())
    if match is None:
        logger.debug("Skipping unparsable field line: {!r}", line)
        return None

    name = match.group("name")
    source_type = match.group("type")
    modifier = match.group("modifier") or ""
    tail = match.group("tail") or ""

    if name in settings.reserved_fields:
        return None

    is_optional = modifier == OPTIONAL_MARKER
    is_list = modifier == LIST_MARKER
    has_default = _DEFAULT_TOKEN.search(tail) is not None
    is_enum = index.is_enum(source_type)

    try:
        annotation = parse_relation_annotation(tail)
        relation = build_relation(
            name,
            source_type,
            is_list,
            annotation,
            index,
            primary_key=settings.primary_key,
            foreign_key_suffix=settings.foreign_key_suffix,
        )
    except MalformedRelationError as exc:
        logger.debug("Ignoring relation on field {}: {}", name, exc)
        relation = None

    # Derive the final flags before mapping so the expression matches them.
    if relation is not None and relation.type in LIST_CARDINALITIES:
        is_list = True
    is_optional = is_optional or has_default

    record = FieldRecord(
        name=name,
        type=source_type,
        zod_type=map_type(source_type, is_optional=is_optional, is_list=is_list, index=index),
        description=f"{name} field",
        is_optional=is_optional,
        is_list=is_list,
        has_default=has_default,
        is_enum=is_enum,
        enum_values=index.enum_values(source_type) if is_enum else (),
        is_relation=relation is not None,
        relation=relation,
    )
    return normalize_field(record)
