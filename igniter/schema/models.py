"""Pydantic v2 models produced by the schema compiler.

A ``FieldRecord`` is the normalized, classified form of one field line of a
Prisma ``model`` block.  Records are frozen and hold tuples rather than lists,
so post-processing (see :func:`igniter.schema.classifier.normalize_field`)
returns a copy instead of mutating in place.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class RelationType(str, Enum):
    """Cardinality of a relation between two models."""
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


LIST_CARDINALITIES = frozenset({RelationType.ONE_TO_MANY, RelationType.MANY_TO_MANY})


# ---------------------------------------------------------------------------
# Relation metadata
# ---------------------------------------------------------------------------

class RelationInfo(BaseModel):
    """Relation metadata attached to a field that references another model."""

    model_config = ConfigDict(frozen=True)

    type: RelationType = Field(..., description="Relation cardinality")
    model: str = Field(
        default="",
        description="Target model name; empty when it could not be resolved",
    )
    fields: tuple[str, ...] = Field(default=(), description="Local key fields")
    references: tuple[str, ...] = Field(
        default=(), description="Referenced key fields on the target model"
    )
    name: Optional[str] = Field(default=None, description="Explicit relation name, if any")


# ---------------------------------------------------------------------------
# Field records
# ---------------------------------------------------------------------------

class FieldRecord(BaseModel):
    """A single compiled field of a schema model."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Field name, unique within its model")
    type: str = Field(..., description="Type token as written in the schema, e.g. 'String'")
    zod_type: str = Field(..., description="Equivalent zod validation expression")
    description: str = Field(default="", description="Human-readable description")
    is_optional: bool = Field(default=False, description="Marked '?' or has a default value")
    is_list: bool = Field(default=False, description="Marked '[]' or a to-many relation")
    has_default: bool = Field(default=False, description="Declares @default(...)")
    is_enum: bool = Field(default=False, description="Type is a declared enum")
    enum_values: tuple[str, ...] = Field(
        default=(), description="Decoded enum literals in declaration order"
    )
    is_relation: bool = Field(default=False, description="Field references another model")
    relation: Optional[RelationInfo] = Field(
        default=None, description="Relation metadata, present only for relations"
    )
