"""entitydesk: schema-driven entity lifecycle and authorization core.

Usage:
    from entitydesk import AppContext, EntitySchema, EntityStatus, Property, save_entity
    from entitydesk.datasource import InMemoryDataSource

    schema = EntitySchema(
        name="Product",
        properties={"title": Property("string"), "status": Property("string")},
        default_values={"status": "draft"},
    )
    context = AppContext(data_source=InMemoryDataSource())
    entity = await save_entity(context, schema, "products", {"title": "X"}, EntityStatus.NEW)
"""

from entitydesk.auth.controller import AuthController
from entitydesk.context import AppContext
from entitydesk.errors import (
    AuthorizationDenied,
    EntityDeskError,
    MissingEntityIdError,
    PersistenceError,
    PreDeleteAborted,
    PreSaveAborted,
    SchemaResolutionError,
)
from entitydesk.lifecycle import (
    DeletePipeline,
    DeleteState,
    SavePipeline,
    SaveState,
    delete_entity,
    save_entity,
)
from entitydesk.schema import (
    Entity,
    EntityHooks,
    EntityReference,
    EntitySchema,
    EntityStatus,
    Property,
    resolve_properties,
)
from entitydesk.values import UNSET, project, serialize_values

__version__ = "0.1.0"

__all__ = [
    "AppContext",
    "AuthController",
    "AuthorizationDenied",
    "DeletePipeline",
    "DeleteState",
    "Entity",
    "EntityDeskError",
    "EntityHooks",
    "EntityReference",
    "EntitySchema",
    "EntityStatus",
    "MissingEntityIdError",
    "PersistenceError",
    "PreDeleteAborted",
    "PreSaveAborted",
    "Property",
    "SavePipeline",
    "SaveState",
    "SchemaResolutionError",
    "UNSET",
    "delete_entity",
    "project",
    "resolve_properties",
    "save_entity",
    "serialize_values",
]
