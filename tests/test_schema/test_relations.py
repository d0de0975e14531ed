"""Unit tests for relation detection (igniter.schema.relations).

Tests cover:
- @relation annotation parsing, including malformed forms
- Cardinality rules, including the multi-key tie-break
- Foreign-key based target inference
- Explicit and implicit relation building
"""

from __future__ import annotations

import pytest

from igniter.schema.errors import MalformedRelationError
from igniter.schema.index import SchemaIndex
from igniter.schema.models import RelationType
from igniter.schema.relations import (
    RelationAnnotation,
    build_relation,
    infer_model_from_foreign_key,
    parse_relation_annotation,
    relation_cardinality,
    resolve_target_model,
)


INDEX = SchemaIndex(models=frozenset({"User", "Post", "Category"}))


# ---------------------------------------------------------------------------
# Annotation parsing
# ---------------------------------------------------------------------------


class TestParseRelationAnnotation:
    @pytest.mark.unit
    def test_no_relation(self):
        assert parse_relation_annotation("@unique @default(now())") is None

    @pytest.mark.unit
    def test_bare_relation(self):
        annotation = parse_relation_annotation("@relation")
        assert annotation == RelationAnnotation()
        assert annotation.has_keys is False

    @pytest.mark.unit
    def test_fields_and_references(self):
        annotation = parse_relation_annotation(
            "@relation(fields: [categoryId], references: [id])"
        )
        assert annotation.name is None
        assert annotation.fields == ("categoryId",)
        assert annotation.references == ("id",)
        assert annotation.has_keys is True

    @pytest.mark.unit
    def test_positional_name(self):
        annotation = parse_relation_annotation(
            '@relation("PostAuthor", fields: [authorId], references: [id])'
        )
        assert annotation.name == "PostAuthor"
        assert annotation.fields == ("authorId",)

    @pytest.mark.unit
    def test_keyword_name_only(self):
        annotation = parse_relation_annotation('@relation(name: "Likes")')
        assert annotation.name == "Likes"
        assert annotation.has_keys is False

    @pytest.mark.unit
    def test_other_arguments_ignored(self):
        annotation = parse_relation_annotation(
            "@relation(fields: [userId], references: [id], onDelete: Cascade) @unique"
        )
        assert annotation.fields == ("userId",)
        assert annotation.references == ("id",)

    @pytest.mark.unit
    def test_composite_keys(self):
        annotation = parse_relation_annotation(
            "@relation(fields: [a, b], references: [x, y])"
        )
        assert annotation.fields == ("a", "b")
        assert annotation.references == ("x", "y")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "tail",
        [
            "@relation(fields: [authorId], references: [id]",
            "@relation(fields: [authorId])",
            "@relation(references: [id])",
            "@relation(fields: authorId, references: [id])",
            "@relation(fields: [], references: [id])",
            "@relation(bogus)",
        ],
    )
    def test_malformed(self, tail):
        with pytest.raises(MalformedRelationError):
            parse_relation_annotation(tail)


# ---------------------------------------------------------------------------
# Cardinality & inference
# ---------------------------------------------------------------------------


class TestCardinality:
    @pytest.mark.unit
    def test_single_key(self):
        assert relation_cardinality(["a"], ["id"], False) is RelationType.ONE_TO_ONE

    @pytest.mark.unit
    def test_single_key_list(self):
        assert relation_cardinality(["a"], ["id"], True) is RelationType.ONE_TO_MANY

    @pytest.mark.unit
    @pytest.mark.parametrize("is_list", [True, False])
    def test_multi_key_is_many_to_many(self, is_list):
        assert relation_cardinality(["a", "b"], ["id"], is_list) is RelationType.MANY_TO_MANY
        assert relation_cardinality(["a"], ["x", "y"], is_list) is RelationType.MANY_TO_MANY


class TestInference:
    @pytest.mark.unit
    def test_infer_from_foreign_key(self):
        assert infer_model_from_foreign_key("authorId") == "Author"
        assert infer_model_from_foreign_key("blogPostId") == "BlogPost"

    @pytest.mark.unit
    @pytest.mark.parametrize("key", ["author", "Id", "author_id", ""])
    def test_infer_rejects_non_convention(self, key):
        assert infer_model_from_foreign_key(key) == ""

    @pytest.mark.unit
    def test_custom_suffix(self):
        assert infer_model_from_foreign_key("owner_id", suffix="_id") == "Owner"

    @pytest.mark.unit
    def test_declared_model_type_wins(self):
        annotation = RelationAnnotation(name="Other", fields=("writerId",), references=("id",))
        assert resolve_target_model("User", annotation, INDEX) == "User"

    @pytest.mark.unit
    def test_name_before_foreign_key(self):
        annotation = RelationAnnotation(name="Writer", fields=("authorId",), references=("id",))
        assert resolve_target_model("Person", annotation, INDEX) == "Writer"

    @pytest.mark.unit
    def test_foreign_key_inference(self):
        annotation = RelationAnnotation(fields=("authorId",), references=("id",))
        assert resolve_target_model("Person", annotation, INDEX) == "Author"

    @pytest.mark.unit
    def test_unresolved_is_empty(self):
        annotation = RelationAnnotation(fields=("owner",), references=("id",))
        assert resolve_target_model("Person", annotation, INDEX) == ""


# ---------------------------------------------------------------------------
# build_relation
# ---------------------------------------------------------------------------


class TestBuildRelation:
    @pytest.mark.unit
    def test_explicit(self):
        annotation = RelationAnnotation(fields=("categoryId",), references=("id",))
        relation = build_relation("category", "Category", False, annotation, INDEX)
        assert relation.type is RelationType.ONE_TO_ONE
        assert relation.model == "Category"
        assert relation.fields == ("categoryId",)
        assert relation.references == ("id",)
        assert relation.name is None

    @pytest.mark.unit
    def test_explicit_list_is_one_to_many(self):
        annotation = RelationAnnotation(fields=("postId",), references=("id",))
        relation = build_relation("posts", "Post", True, annotation, INDEX)
        assert relation.type is RelationType.ONE_TO_MANY

    @pytest.mark.unit
    def test_explicit_unresolved_target(self):
        annotation = RelationAnnotation(fields=("thing",), references=("id",))
        relation = build_relation("thing", "Widget", False, annotation, INDEX)
        assert relation is not None
        assert relation.model == ""

    @pytest.mark.unit
    def test_implicit(self):
        relation = build_relation("author", "User", False, None, INDEX)
        assert relation.type is RelationType.ONE_TO_ONE
        assert relation.model == "User"
        assert relation.fields == ("authorId",)
        assert relation.references == ("id",)

    @pytest.mark.unit
    def test_implicit_list(self):
        relation = build_relation("posts", "Post", True, None, INDEX)
        assert relation.type is RelationType.ONE_TO_MANY
        assert relation.fields == ("postsId",)

    @pytest.mark.unit
    def test_name_only_annotation_on_model_type(self):
        relation = build_relation("posts", "Post", True, RelationAnnotation(name="PostAuthor"), INDEX)
        assert relation.model == "Post"
        assert relation.name == "PostAuthor"

    @pytest.mark.unit
    def test_custom_key_conventions(self):
        relation = build_relation(
            "owner", "User", False, None, INDEX,
            primary_key="uuid", foreign_key_suffix="_id",
        )
        assert relation.fields == ("owner_id",)
        assert relation.references == ("uuid",)

    @pytest.mark.unit
    def test_not_a_relation(self):
        assert build_relation("title", "String", False, None, INDEX) is None
        assert build_relation("tags", "String", True, RelationAnnotation(), INDEX) is None
