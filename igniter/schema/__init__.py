"""Prisma schema compiler.

Reads ``prisma/schema.prisma`` and compiles a model into normalized field
records carrying zod expressions, enum literals and relation metadata.

Usage::

    from igniter.schema import SchemaCompiler

    compiler = SchemaCompiler("path/to/project")
    if compiler.has_model("Post"):
        for field in compiler.get_model_fields("Post"):
            print(field.name, field.zod_type)
"""

from igniter.schema.compiler import (
    SchemaCompiler,
    compile_model,
    compile_reserved_fields,
    default_reserved_fields,
    fallback_fields,
    normalize_fields,
)
from igniter.schema.classifier import classify_line, normalize_field
from igniter.schema.errors import SchemaError, SchemaNotFoundError
from igniter.schema.index import SchemaIndex
from igniter.schema.models import FieldRecord, RelationInfo, RelationType
from igniter.schema.type_mapper import map_type

__all__ = [
    "SchemaCompiler",
    "compile_model",
    "compile_reserved_fields",
    "default_reserved_fields",
    "fallback_fields",
    "normalize_fields",
    "classify_line",
    "normalize_field",
    "map_type",
    "SchemaIndex",
    "SchemaError",
    "SchemaNotFoundError",
    "FieldRecord",
    "RelationInfo",
    "RelationType",
]
