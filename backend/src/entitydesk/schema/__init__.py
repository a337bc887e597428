"""Entity schemas: properties, resolution and declarative loading."""

from entitydesk.schema.properties import (
    PropertiesBuilder,
    PropertiesOrBuilder,
    Property,
    PropertyBuilder,
    PropertyMap,
    ValidationRules,
)
from entitydesk.schema.resolver import resolve_properties
from entitydesk.schema.types import (
    Entity,
    EntityCustomView,
    EntityDeleteProps,
    EntityHooks,
    EntityReference,
    EntitySaveProps,
    EntitySchema,
    EntityStatus,
    PropertyBuilderContext,
)

__all__ = [
    "Entity",
    "EntityCustomView",
    "EntityDeleteProps",
    "EntityHooks",
    "EntityReference",
    "EntitySaveProps",
    "EntitySchema",
    "EntityStatus",
    "PropertiesBuilder",
    "PropertiesOrBuilder",
    "Property",
    "PropertyBuilder",
    "PropertyBuilderContext",
    "PropertyMap",
    "ValidationRules",
    "resolve_properties",
]
