"""Maps Prisma types to zod validation expressions.

Resolution order: declared enum, primitive table, then a non-empty string
fallback for anything else (unknown types are almost always relation
placeholders that serialize as identifier strings).  The base expression is
wrapped in ``z.array(...)`` for lists first and ``.optional().nullable()``
second, so an optional list reads "optional array of T".
"""

from __future__ import annotations

from collections.abc import Sequence

from .index import SchemaIndex

UNKNOWN_TYPE_EXPRESSION = "z.string().min(1)"

PRIMITIVE_TYPES: dict[str, str] = {
    "String": "z.string()",
    "Int": "z.number().int()",
    "Float": "z.number()",
    "Boolean": "z.boolean()",
    "DateTime": "z.date()",
    "Json": "z.any()",
    "BigInt": "z.bigint()",
    "Decimal": "z.number()",
    "Bytes": "z.instanceof(Buffer)",
}


def enum_expression(values: Sequence[str]) -> str:
    """Build ``z.enum([...])`` over already-decoded literals."""
    literals = ", ".join(f"'{value}'" for value in values)
    return f"z.enum([{literals}])"


def uuid_expression(version: str | None) -> str:
    if version is None:
        return "z.string().uuid()"
    return f"z.string().uuid({{ version: {version} }})"


def base_expression(source_type: str, index: SchemaIndex) -> str:
    """Return the unwrapped zod expression for *source_type*."""
    if index.is_enum(source_type):
        return enum_expression(index.enum_values(source_type))
    if source_type == "UUID":
        return uuid_expression(index.uuid_version)
    return PRIMITIVE_TYPES.get(source_type, UNKNOWN_TYPE_EXPRESSION)


def map_type(
    source_type: str,
    is_optional: bool = False,
    is_list: bool = False,
    index: SchemaIndex | None = None,
) -> str:
    """Map a schema type to its zod expression.

    Args:
        source_type: Type token as written in the schema, e.g. ``"Int"``.
        is_optional: Wrap in ``.optional().nullable()``.
        is_list: Wrap in ``z.array(...)``.
        index: Document index used to resolve enums and the UUID version.
            Defaults to an empty index.

    Returns:
        The zod expression string.
    """
    expression = base_expression(source_type, index or SchemaIndex())
    if is_list:
        expression = f"z.array({expression})"
    if is_optional:
        expression = f"{expression}.optional().nullable()"
    return expression
