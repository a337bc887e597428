"""Resolve a schema's properties for a given entity state.

Static property maps come back as-is (as a new ordered dict); builders,
either for the whole map or for single keys, are invoked with the current
values. Resolution is all-or-nothing: if any builder raises, no partial
map is returned.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from entitydesk.errors import SchemaResolutionError
from entitydesk.schema.properties import Property
from entitydesk.schema.types import EntitySchema, PropertyBuilderContext

logger = logging.getLogger(__name__)


def resolve_properties(
    schema: EntitySchema,
    values: Mapping[str, Any] | None,
    entity_id: str | None,
    path: str,
) -> dict[str, Property]:
    """Produce the concrete ordered property map for an entity.

    Args:
        schema: The entity schema
        values: Current (possibly partial) entity values
        entity_id: Entity id, None for new entities
        path: Collection path

    Returns:
        Ordered mapping of property key to Property

    Raises:
        SchemaResolutionError: If a builder raises or returns something
            that is not a Property
    """
    # Builders get a read-only snapshot so they cannot mutate caller state
    context = PropertyBuilderContext(
        values=MappingProxyType(dict(values or {})),
        entity_id=entity_id,
        path=path,
    )

    properties = schema.properties
    if callable(properties):
        try:
            properties = properties(context)
        except Exception as e:
            raise SchemaResolutionError(path, e) from e
        if not isinstance(properties, Mapping):
            raise SchemaResolutionError(
                path,
                TypeError(
                    f"properties builder returned {type(properties).__name__}, "
                    "expected a mapping"
                ),
            )

    resolved: dict[str, Property] = {}
    for key, prop in properties.items():
        if callable(prop):
            try:
                prop = prop(context)
            except Exception as e:
                raise SchemaResolutionError(f"{path}.{key}", e) from e
        if not isinstance(prop, Property):
            raise SchemaResolutionError(
                f"{path}.{key}",
                TypeError(f"expected Property, got {type(prop).__name__}"),
            )
        resolved[key] = prop

    logger.debug("Resolved %d properties for %s (id=%s)", len(resolved), path, entity_id)
    return resolved
