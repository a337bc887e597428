"""Property model for entity schemas.

A Property describes one field of an entity: its data type, validation
rules and the variant-specific details (enum choices, reference target,
array element, nested map).
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from entitydesk.core.types import get_property_type

if TYPE_CHECKING:
    from entitydesk.schema.types import PropertyBuilderContext


@dataclass
class ValidationRules:
    required: bool = False
    min: float | None = None
    max: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    unique_in_array: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ValidationRules":
        data = data or {}
        return cls(
            required=data.get("required", False),
            min=data.get("min"),
            max=data.get("max"),
            min_length=data.get("minLength"),
            max_length=data.get("maxLength"),
            pattern=data.get("pattern"),
            unique_in_array=data.get("uniqueInArray", False),
        )


@dataclass
class Property:
    """Typed description of a single entity field.

    Attributes:
        data_type: One of the registered property types (see core.types)
        title: Human-readable label
        description: Help text
        validation: Field-level rules
        enum_values: Stored value -> label mapping (enum only)
        path: Target collection path (reference only)
        of: Element property (array only)
        properties: Nested ordered property map (map only)
        read_only: Field is computed or system-managed
        storage: Opaque metadata forwarded to the storage collaborator
    """

    data_type: str
    title: str | None = None
    description: str | None = None
    validation: ValidationRules = field(default_factory=ValidationRules)
    enum_values: dict[Any, str] | None = None
    path: str | None = None
    of: "Property | None" = None
    properties: dict[str, "Property"] | None = None
    read_only: bool = False
    storage: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        get_property_type(self.data_type)

        if self.data_type == "enum" and not self.enum_values:
            raise ValueError("enum properties require enum_values")
        if self.data_type == "reference" and not self.path:
            raise ValueError("reference properties require a target path")
        if self.data_type == "array" and self.of is None:
            raise ValueError("array properties require an element property (of)")
        if self.data_type == "map" and self.properties is None:
            self.properties = {}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Property":
        """Create a Property from its declarative (YAML/JSON) form."""
        of_data = data.get("of")
        nested = data.get("properties")
        return cls(
            data_type=data.get("dataType", "string"),
            title=data.get("title"),
            description=data.get("description"),
            validation=ValidationRules.from_dict(data.get("validation")),
            enum_values=data.get("enumValues"),
            path=data.get("path"),
            of=cls.from_dict(of_data) if of_data else None,
            properties=(
                {key: cls.from_dict(value) for key, value in nested.items()}
                if nested is not None
                else None
            ),
            read_only=data.get("readOnly", False),
            storage=data.get("storage"),
        )


# A builder derives a property definition from the entity's in-progress values.
PropertyBuilder = Callable[["PropertyBuilderContext"], Property]

# A schema's properties: a static map (entries may be per-key builders)
# or a builder for the whole map.
PropertyMap = Mapping[str, "Property | PropertyBuilder"]
PropertiesBuilder = Callable[["PropertyBuilderContext"], Mapping[str, Property]]
PropertiesOrBuilder = PropertyMap | PropertiesBuilder
