"""Tests for the property model and data type registry."""

import pytest

from entitydesk.core.types import PROPERTY_TYPES, get_property_type
from entitydesk.schema.properties import Property, ValidationRules


class TestPropertyTypes:
    def test_all_variants_registered(self):
        assert set(PROPERTY_TYPES) == {
            "string", "number", "boolean", "date", "reference", "array", "map", "enum",
        }

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="Unknown property data type"):
            get_property_type("currency")

    def test_number_accepts_int_and_float(self):
        assert get_property_type("number").value_types == (int, float)

    def test_accepts_native_values(self):
        assert get_property_type("number").accepts(3)
        assert get_property_type("number").accepts(2.5)
        assert get_property_type("map").accepts({"a": 1})
        assert get_property_type("array").accepts(("a",))
        assert not get_property_type("string").accepts(3)

    def test_bool_only_accepted_as_boolean(self):
        assert get_property_type("boolean").accepts(True)
        assert not get_property_type("number").accepts(True)
        assert not get_property_type("enum").accepts(False)

    def test_references_are_never_native(self):
        assert not get_property_type("reference").accepts("users/u1")

    def test_composite_flag(self):
        assert get_property_type("array").composite
        assert get_property_type("map").composite
        assert not get_property_type("string").composite


class TestProperty:
    def test_defaults(self):
        prop = Property("string")
        assert prop.validation == ValidationRules()
        assert not prop.read_only
        assert prop.enum_values is None

    def test_unknown_data_type_rejected(self):
        with pytest.raises(ValueError):
            Property("blob")

    def test_enum_requires_values(self):
        with pytest.raises(ValueError, match="enum_values"):
            Property("enum")

    def test_reference_requires_path(self):
        with pytest.raises(ValueError, match="path"):
            Property("reference")

    def test_array_requires_element(self):
        with pytest.raises(ValueError, match="of"):
            Property("array")

    def test_map_defaults_to_empty_properties(self):
        assert Property("map").properties == {}


class TestPropertyFromDict:
    def test_full_declaration(self):
        prop = Property.from_dict({
            "dataType": "string",
            "title": "Title",
            "validation": {"required": True, "minLength": 2, "maxLength": 40, "pattern": "^[A-Z]"},
            "readOnly": True,
        })
        assert prop.data_type == "string"
        assert prop.title == "Title"
        assert prop.validation.required
        assert prop.validation.min_length == 2
        assert prop.validation.max_length == 40
        assert prop.validation.pattern == "^[A-Z]"
        assert prop.read_only

    def test_missing_data_type_defaults_to_string(self):
        assert Property.from_dict({}).data_type == "string"

    def test_nested_array_and_map(self):
        prop = Property.from_dict({
            "dataType": "array",
            "of": {
                "dataType": "map",
                "properties": {
                    "name": {"dataType": "string"},
                    "qty": {"dataType": "number", "validation": {"min": 1}},
                },
            },
        })
        assert prop.of.data_type == "map"
        assert list(prop.of.properties) == ["name", "qty"]
        assert prop.of.properties["qty"].validation.min == 1

    def test_reference_and_enum(self):
        ref = Property.from_dict({"dataType": "reference", "path": "users"})
        assert ref.path == "users"
        enum = Property.from_dict({"dataType": "enum", "enumValues": {"a": "A"}})
        assert enum.enum_values == {"a": "A"}
