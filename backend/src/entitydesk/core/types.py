"""Property data type registry with value types and supported rules."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


@dataclass
class PropertyType:
    name: str
    value_types: tuple[type, ...]
    rules: tuple[str, ...]
    composite: bool = False

    def accepts(self, value: Any) -> bool:
        """Check if a value already has one of this type's native Python types.

        bool is an int subclass; it only counts where bool is listed.
        """
        if isinstance(value, bool) and bool not in self.value_types:
            return False
        return isinstance(value, self.value_types)


# Built-in property data types
PROPERTY_TYPES: dict[str, PropertyType] = {
    "string": PropertyType(
        name="string",
        value_types=(str,),
        rules=("required", "min_length", "max_length", "pattern"),
    ),
    "number": PropertyType(
        name="number",
        value_types=(int, float),
        rules=("required", "min", "max"),
    ),
    "boolean": PropertyType(
        name="boolean",
        value_types=(bool,),
        rules=("required",),
    ),
    "date": PropertyType(
        name="date",
        value_types=(datetime, date),
        rules=("required",),
    ),
    "reference": PropertyType(
        name="reference",
        value_types=(),  # EntityReference, checked by the projector
        rules=("required",),
    ),
    "enum": PropertyType(
        name="enum",
        value_types=(str, int),
        rules=("required",),
    ),
    "array": PropertyType(
        name="array",
        value_types=(list, tuple),
        rules=("required", "min_length", "max_length", "unique_in_array"),
        composite=True,
    ),
    "map": PropertyType(
        name="map",
        value_types=(Mapping,),
        rules=("required",),
        composite=True,
    ),
}


def get_property_type(type_name: str) -> PropertyType:
    """Get property type definition.

    Raises:
        ValueError: If the type name is not registered
    """
    if type_name not in PROPERTY_TYPES:
        raise ValueError(
            f"Unknown property data type '{type_name}'. "
            f"Expected one of: {', '.join(PROPERTY_TYPES)}"
        )
    return PROPERTY_TYPES[type_name]
