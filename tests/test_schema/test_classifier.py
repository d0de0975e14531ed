"""Unit tests for field-line classification (igniter.schema.classifier).

Tests cover:
- Primitive, optional, list and default-valued fields
- Enum fields with decoded literals
- Explicit, implicit and malformed relations
- Reserved and unparsable lines
- normalize_field idempotence
"""

from __future__ import annotations

import pytest

from igniter.config import SchemaSettings
from igniter.schema.classifier import classify_line, normalize_field
from igniter.schema.index import SchemaIndex
from igniter.schema.models import FieldRecord, RelationInfo, RelationType

pytestmark = pytest.mark.unit


@pytest.fixture
def index(schema_text) -> SchemaIndex:
    return SchemaIndex.from_text(schema_text)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class TestScalarFields:
    def test_plain_string(self, index):
        record = classify_line("title String", index)
        assert record.name == "title"
        assert record.type == "String"
        assert record.zod_type == "z.string()"
        assert record.description == "title field"
        assert not record.is_optional
        assert not record.is_list
        assert not record.is_relation
        assert record.relation is None

    def test_optional_marker(self, index):
        record = classify_line("rating Float?", index)
        assert record.is_optional
        assert record.zod_type == "z.number().optional().nullable()"

    def test_list_of_strings(self, index):
        record = classify_line("tags String[]", index)
        assert record.is_list is True
        assert record.is_relation is False
        assert record.zod_type == "z.array(z.string())"

    def test_default_makes_optional(self, index):
        record = classify_line("views Int @default(0)", index)
        assert record.has_default is True
        assert record.is_optional is True
        assert record.zod_type == "z.number().int().optional().nullable()"

    def test_other_annotations_do_not_count_as_default(self, index):
        record = classify_line("email String @unique", index)
        assert record.has_default is False
        assert record.is_optional is False


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TestEnumFields:
    def test_enum_field(self, index):
        record = classify_line("status Status", index)
        assert record.is_enum is True
        assert record.enum_values == ("DRAFT", "PUBLISHED")
        assert record.zod_type == "z.enum(['DRAFT', 'PUBLISHED'])"

    def test_escaped_literal_is_decoded(self, index):
        record = classify_line("role Role @default(EDITOR)", index)
        assert record.enum_values == ("ADMIN", "EDITOR", "R&D")
        assert record.zod_type == "z.enum(['ADMIN', 'EDITOR', 'R&D']).optional().nullable()"

    def test_non_enum_has_no_values(self, index):
        record = classify_line("title String", index)
        assert record.is_enum is False
        assert record.enum_values == ()


# ---------------------------------------------------------------------------
# Relations
# ---------------------------------------------------------------------------


class TestRelationFields:
    def test_explicit_relation(self, index):
        record = classify_line(
            "category Category @relation(fields: [categoryId], references: [id])", index
        )
        assert record.is_relation is True
        assert record.relation.type is RelationType.ONE_TO_ONE
        assert record.relation.model == "Category"
        assert record.relation.fields == ("categoryId",)
        assert record.relation.references == ("id",)

    def test_list_with_single_key_is_one_to_many(self, index):
        record = classify_line(
            "posts Post[] @relation(fields: [postId], references: [id])", index
        )
        assert record.relation.type is RelationType.ONE_TO_MANY
        assert record.is_list is True

    def test_multi_key_forces_list(self, index):
        record = classify_line(
            "owner User @relation(fields: [a, b], references: [x, y])", index
        )
        assert record.relation.type is RelationType.MANY_TO_MANY
        assert record.is_list is True
        assert record.zod_type == "z.array(z.string().min(1))"

    def test_implicit_relation(self, index):
        record = classify_line("profile Profile?", index)
        assert record.is_relation is True
        assert record.relation.model == "Profile"
        assert record.relation.fields == ("profileId",)
        assert record.relation.references == ("id",)
        assert record.zod_type == "z.string().min(1).optional().nullable()"

    def test_unresolved_target_is_empty(self, index):
        record = classify_line(
            "owner Person @relation(fields: [owner], references: [id])", index
        )
        assert record.is_relation is True
        assert record.relation.model == ""

    def test_malformed_relation_is_dropped(self, index):
        record = classify_line(
            "author Person @relation(fields: [authorId], references: [id]", index
        )
        assert record is not None
        assert record.is_relation is False
        assert record.relation is None

    def test_malformed_relation_on_model_type_is_not_implicit(self, index):
        record = classify_line("author User @relation(fields: [authorId])", index)
        assert record.relation is None
        assert record.is_relation is False

    def test_custom_foreign_key_suffix(self, index):
        settings = SchemaSettings(foreign_key_suffix="_id")
        record = classify_line("author User", index, settings)
        assert record.relation.fields == ("author_id",)


# ---------------------------------------------------------------------------
# Rejected lines
# ---------------------------------------------------------------------------


class TestRejectedLines:
    @pytest.mark.parametrize(
        "line",
        [
            "id String @id @default(uuid())",
            "createdAt DateTime @default(now())",
            "updatedAt DateTime @updatedAt",
            "id Int @id",
        ],
    )
    def test_reserved_names(self, index, line):
        assert classify_line(line, index) is None

    def test_custom_reserved_names(self, index):
        settings = SchemaSettings(reserved_fields=["slug"])
        assert classify_line("slug String", index, settings) is None
        assert classify_line("id String", index, settings) is not None

    @pytest.mark.parametrize(
        "line",
        ["...", "@@index([title])", "title", 'data Unsupported("circle")', "a b c"],
    )
    def test_unparsable(self, index, line):
        assert classify_line(line, index) is None


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalizeField:
    def test_derives_flags_from_relation(self):
        record = FieldRecord(
            name="posts",
            type="Post",
            zod_type="z.string().min(1)",
            relation=RelationInfo(type=RelationType.ONE_TO_MANY, model="Post"),
        )
        normalized = normalize_field(record)
        assert normalized.is_relation is True
        assert normalized.is_list is True
        assert normalized.is_optional is False

    def test_default_implies_optional(self):
        record = FieldRecord(name="views", type="Int", zod_type="z.number().int()", has_default=True)
        assert normalize_field(record).is_optional is True

    def test_idempotent(self, index):
        lines = [
            "title String",
            "views Int @default(0)",
            "posts Post[]",
            "author User @relation(fields: [authorId], references: [id])",
            "owner User @relation(fields: [a, b], references: [x, y])",
        ]
        for line in lines:
            once = normalize_field(classify_line(line, index))
            assert normalize_field(once) == once

    def test_unchanged_record_is_returned_as_is(self):
        record = FieldRecord(name="title", type="String", zod_type="z.string()")
        assert normalize_field(record) is record


# ---------------------------------------------------------------------------
# Immutability
# ---------------------------------------------------------------------------


class TestRecordImmutability:
    def test_sequences_are_tuples(self, index):
        role = classify_line("role Role", index)
        author = classify_line(
            "author User @relation(fields: [authorId], references: [id])", index
        )
        assert isinstance(role.enum_values, tuple)
        assert isinstance(author.relation.fields, tuple)
        assert isinstance(author.relation.references, tuple)

    def test_list_input_is_frozen(self):
        record = FieldRecord(
            name="status",
            type="Status",
            zod_type="z.enum(['A'])",
            enum_values=["A"],
            relation=RelationInfo(type=RelationType.ONE_TO_ONE, fields=["a"], references=["id"]),
        )
        with pytest.raises(AttributeError):
            record.enum_values.append("B")
        with pytest.raises(AttributeError):
            record.relation.fields.append("b")

    def test_records_are_hashable(self, index):
        line = "author User @relation(fields: [authorId], references: [id])"
        assert hash(classify_line(line, index)) == hash(classify_line(line, index))
