"""Entity schema and entity types.

Defines the declarative schema consumed by the lifecycle pipelines and
the runtime entity representation:
- EntitySchema: properties, defaults, custom id policy and lifecycle hooks
- Entity / EntityReference: one stored record and its location handle
- EntitySaveProps / EntityDeleteProps: arguments passed to hooks
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from entitydesk.schema.properties import PropertiesOrBuilder

if TYPE_CHECKING:
    from entitydesk.context import AppContext


class EntityStatus(Enum):
    """Lifecycle status of an entity being edited.

    NEW: No persisted id yet
    EXISTING: Backed by a stored record
    COPY: Carries a source entity's values but no persisted id
    """

    NEW = "new"
    EXISTING = "existing"
    COPY = "copy"


@dataclass(frozen=True)
class EntityReference:
    """Opaque handle to a stored document location."""

    id: str
    path: str

    @property
    def path_with_id(self) -> str:
        return f"{self.path}/{self.id}"

    @classmethod
    def parse(cls, full_path: str) -> "EntityReference":
        """Build a reference from a "collection/path/id" string."""
        path, _, entity_id = full_path.rstrip("/").rpartition("/")
        if not path or not entity_id:
            raise ValueError(f"Not a document path: '{full_path}'")
        return cls(id=entity_id, path=path)


@dataclass(frozen=True)
class Entity:
    """A fetched or newly saved record plus its typed values."""

    id: str
    reference: EntityReference
    values: dict[str, Any]

    @property
    def collection_path(self) -> str:
        return self.reference.path


@dataclass(frozen=True)
class PropertyBuilderContext:
    """Input handed to property builders.

    Attributes:
        values: Current (possibly partial) entity values, read-only
        entity_id: Id of the entity, None while it is new
        path: Collection path of the entity
    """

    values: Mapping[str, Any]
    entity_id: str | None
    path: str


@dataclass
class EntitySaveProps:
    """Parameters passed to the save hooks.

    Attributes:
        schema: Schema of the entity being saved
        collection_path: Path of the parent collection
        id: Entity id, or None while the data source has not assigned one
        values: Values being saved
        status: New, existing or copy
        context: Application context (data source, auth controller, ...)
        error: The persistence error (onSaveFailure only)
    """

    schema: "EntitySchema"
    collection_path: str
    id: str | None
    values: dict[str, Any]
    status: EntityStatus
    context: "AppContext | None" = None
    error: BaseException | None = None


@dataclass
class EntityDeleteProps:
    """Parameters passed to the delete hooks."""

    schema: "EntitySchema"
    collection_path: str
    id: str
    entity: Entity
    context: "AppContext | None" = None


# Hooks may be plain functions or coroutine functions.
PreSaveHook = Callable[[EntitySaveProps], "dict[str, Any] | None | Awaitable[dict[str, Any] | None]"]
SaveHook = Callable[[EntitySaveProps], "None | Awaitable[None]"]
DeleteHook = Callable[[EntityDeleteProps], "None | Awaitable[None]"]


@dataclass(frozen=True)
class EntityHooks:
    on_pre_save: PreSaveHook | None = None
    on_save_success: SaveHook | None = None
    on_save_failure: SaveHook | None = None
    on_pre_delete: DeleteHook | None = None
    on_delete: DeleteHook | None = None


@dataclass(frozen=True)
class EntityCustomView:
    """Additional panel for the entity detail view, rendered externally."""

    path: str
    name: str
    builder: Callable[..., Any]


@dataclass(frozen=True)
class EntitySchema:
    """Declarative description of an entity.

    Attributes:
        name: Singular display name (e.g. "Product")
        properties: Property map (entries may be builders) or a builder
            for the whole map
        description: Human-readable description
        custom_id: False lets the data source generate ids, True requires
            the caller to supply one, a mapping restricts ids to its keys
        default_values: Initial values for new entities
        hooks: Lifecycle hooks
        views: Custom views for renderers
    """

    name: str
    properties: PropertiesOrBuilder
    description: str | None = None
    custom_id: bool | Mapping[str, str] = False
    default_values: Mapping[str, Any] = field(default_factory=dict)
    hooks: EntityHooks = field(default_factory=EntityHooks)
    views: tuple[EntityCustomView, ...] = ()

    @property
    def has_builder(self) -> bool:
        """True when any part of the property map is context-sensitive."""
        if callable(self.properties):
            return True
        return any(callable(p) for p in self.properties.values())

    def accepts_id(self, entity_id: str | None) -> bool:
        """Check an explicit id (or its absence) against the custom id policy."""
        if entity_id is None:
            return not self.custom_id
        if isinstance(self.custom_id, Mapping):
            return entity_id in self.custom_id
        return True
