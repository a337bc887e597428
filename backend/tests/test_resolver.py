"""Tests for schema resolution."""

import pytest

from entitydesk.errors import SchemaResolutionError
from entitydesk.schema.properties import Property
from entitydesk.schema.resolver import resolve_properties
from entitydesk.schema.types import EntitySchema


def category_builder(ctx):
    """Enum choices depend on the sibling 'kind' value."""
    if ctx.values.get("kind") == "book":
        return Property("enum", enum_values={"fiction": "Fiction", "essay": "Essay"})
    return Property("enum", enum_values={"other": "Other"})


class TestStaticProperties:
    def test_returns_equal_map(self, product_schema):
        resolved = resolve_properties(product_schema, {}, None, "products")
        assert resolved == dict(product_schema.properties)

    def test_preserves_declared_order(self):
        schema = EntitySchema(
            name="Ordered",
            properties={"z": Property("string"), "a": Property("number"), "m": Property("boolean")},
        )
        assert list(resolve_properties(schema, None, None, "ordered")) == ["z", "a", "m"]

    def test_has_builder_false(self, product_schema):
        assert not product_schema.has_builder


class TestPerPropertyBuilders:
    def test_builder_sees_current_values(self):
        schema = EntitySchema(
            name="Item",
            properties={"kind": Property("string"), "category": category_builder},
        )
        assert schema.has_builder

        book = resolve_properties(schema, {"kind": "book"}, None, "items")
        other = resolve_properties(schema, {"kind": "toy"}, None, "items")
        assert set(book["category"].enum_values) == {"fiction", "essay"}
        assert set(other["category"].enum_values) == {"other"}

    def test_builder_receives_id_and_path(self):
        seen = {}

        def builder(ctx):
            seen["id"] = ctx.entity_id
            seen["path"] = ctx.path
            return Property("string")

        schema = EntitySchema(name="Item", properties={"x": builder})
        resolve_properties(schema, {}, "item-1", "shops/s1/items")
        assert seen == {"id": "item-1", "path": "shops/s1/items"}

    def test_builder_cannot_mutate_values(self):
        def mutating(ctx):
            ctx.values["kind"] = "hacked"
            return Property("string")

        values = {"kind": "book"}
        schema = EntitySchema(name="Item", properties={"x": mutating})
        with pytest.raises(SchemaResolutionError):
            resolve_properties(schema, values, None, "items")
        assert values == {"kind": "book"}

    def test_builder_error_carries_key_path(self):
        def broken(ctx):
            raise RuntimeError("boom")

        schema = EntitySchema(
            name="Item", properties={"ok": Property("string"), "bad": broken}
        )
        with pytest.raises(SchemaResolutionError) as exc_info:
            resolve_properties(schema, {}, None, "items")
        assert exc_info.value.key_path == "items.bad"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_builder_returning_non_property(self):
        schema = EntitySchema(name="Item", properties={"bad": lambda ctx: "string"})
        with pytest.raises(SchemaResolutionError, match="expected Property"):
            resolve_properties(schema, {}, None, "items")


class TestWholeMapBuilder:
    def test_builder_result_used(self):
        def properties(ctx):
            props = {"title": Property("string")}
            if ctx.entity_id is not None:
                props["createdAt"] = Property("date", read_only=True)
            return props

        schema = EntitySchema(name="Post", properties=properties)
        assert list(resolve_properties(schema, {}, None, "posts")) == ["title"]
        assert list(resolve_properties(schema, {}, "p1", "posts")) == ["title", "createdAt"]

    def test_builder_error_uses_collection_path(self):
        def properties(ctx):
            raise KeyError("missing")

        schema = EntitySchema(name="Post", properties=properties)
        with pytest.raises(SchemaResolutionError) as exc_info:
            resolve_properties(schema, {}, None, "posts")
        assert exc_info.value.key_path == "posts"

    def test_builder_returning_non_mapping(self):
        schema = EntitySchema(name="Post", properties=lambda ctx: [Property("string")])
        with pytest.raises(SchemaResolutionError, match="expected a mapping"):
            resolve_properties(schema, {}, None, "posts")

    def test_map_entries_may_themselves_be_builders(self):
        schema = EntitySchema(
            name="Item",
            properties=lambda ctx: {"kind": Property("string"), "category": category_builder},
        )
        resolved = resolve_properties(schema, {"kind": "book"}, None, "items")
        assert "essay" in resolved["category"].enum_values
