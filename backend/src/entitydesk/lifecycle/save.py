"""Save pipeline.

States:
    IDLE -> RESOLVING -> PRE_SAVING -> PERSISTING -> SUCCEEDED
    IDLE -> RESOLVING -> PRE_SAVING -> ABORTED
    IDLE -> RESOLVING -> PRE_SAVING -> PERSISTING -> FAILED

RESOLVING re-runs the schema resolver against the values about to be
saved. PRE_SAVING lets onPreSave transform the values or abort. Exactly
one of onSaveSuccess / onSaveFailure fires per attempt that reaches
PERSISTING; both are best-effort.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from entitydesk.context import AppContext
from entitydesk.errors import (
    MissingEntityIdError,
    PersistenceError,
    PreSaveAborted,
    SchemaResolutionError,
)
from entitydesk.hooks.service import call_hook, run_post_commit_hook
from entitydesk.lifecycle.base import Pipeline
from entitydesk.schema.resolver import resolve_properties
from entitydesk.schema.types import Entity, EntityReference, EntitySaveProps, EntitySchema, EntityStatus
from entitydesk.values.projector import project, serialize_values
from entitydesk.values.types import ProjectionResult

logger = logging.getLogger(__name__)


class SaveState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    PRE_SAVING = "preSaving"
    PERSISTING = "persisting"
    SUCCEEDED = "succeeded"
    ABORTED = "aborted"
    FAILED = "failed"


class SavePipeline(Pipeline[SaveState]):
    """Orchestrates one save attempt for one entity.

    Usage:
        pipeline = SavePipeline(context)
        entity = await pipeline.run(schema, "products", {"title": "X"}, EntityStatus.NEW)
        assert pipeline.state is SaveState.SUCCEEDED
    """

    IDLE = SaveState.IDLE
    ABORTED = SaveState.ABORTED
    TERMINAL = frozenset({SaveState.SUCCEEDED, SaveState.ABORTED, SaveState.FAILED})

    def __init__(self, context: AppContext):
        super().__init__(context)
        self.projection: ProjectionResult | None = None

    async def run(
        self,
        schema: EntitySchema,
        collection_path: str,
        values: Mapping[str, Any],
        status: EntityStatus,
        entity_id: str | None = None,
    ) -> Entity:
        """Save an entity.

        Args:
            schema: The entity schema
            collection_path: Path of the parent collection
            values: Values to save (for new/copy entities, layered over
                the schema's default values)
            status: New, existing or copy
            entity_id: Explicit id; None lets the data source generate one

        Returns:
            The saved entity with its committed id

        Raises:
            MissingEntityIdError: The schema's custom id policy rejects the id
            AuthorizationDenied: The session's roles forbid the operation
            SchemaResolutionError: A property builder raised
            PreSaveAborted: onPreSave raised; nothing was written
            PersistenceError: The data source write failed
        """
        self._start()

        if status is EntityStatus.EXISTING and entity_id is None:
            raise MissingEntityIdError("Existing entities must be saved with their id")
        if status is not EntityStatus.EXISTING and not schema.accepts_id(entity_id):
            raise MissingEntityIdError(
                f"Schema '{schema.name}' requires a valid custom id, got {entity_id!r}"
            )

        operation = "update" if status is EntityStatus.EXISTING else "create"
        self._check_permission(operation, collection_path)

        # RESOLVING: builders see the record about to be written, defaults included
        self._transition(SaveState.RESOLVING)
        if status is EntityStatus.EXISTING:
            pending = dict(values)
        else:
            pending = {**schema.default_values, **values}
        try:
            properties = resolve_properties(schema, pending, entity_id, collection_path)
        except SchemaResolutionError:
            self._transition(SaveState.ABORTED)
            raise

        if status is EntityStatus.EXISTING:
            projection = project(values, properties, status=status)
        else:
            projection = project(
                None, properties, schema.default_values, status, overrides=values
            )
        self.projection = projection
        if not projection.valid:
            logger.debug(
                "Saving %s with %d validation issue(s)", collection_path, len(projection.errors)
            )
        to_save = serialize_values(projection.values, projection.stored_forms)

        # PRE_SAVING
        self._transition(SaveState.PRE_SAVING)
        hooks = schema.hooks
        if hooks.on_pre_save is not None:
            props = EntitySaveProps(
                schema=schema,
                collection_path=collection_path,
                id=entity_id,
                values=dict(to_save),
                status=status,
                context=self.context,
            )
            try:
                transformed = await call_hook(hooks.on_pre_save, props)
            except Exception as e:
                self._transition(SaveState.ABORTED)
                raise PreSaveAborted(f"onPreSave failed for '{schema.name}': {e}") from e
            if transformed is not None:
                if not isinstance(transformed, Mapping):
                    self._transition(SaveState.ABORTED)
                    raise PreSaveAborted(
                        f"onPreSave for '{schema.name}' returned "
                        f"{type(transformed).__name__}, expected a mapping of values"
                    )
                to_save = serialize_values(transformed)

        # PERSISTING
        self._transition(SaveState.PERSISTING)
        try:
            committed_id = await self.context.data_source.set(collection_path, entity_id, to_save)
        except Exception as e:
            self._transition(SaveState.FAILED)
            await run_post_commit_hook(
                "onSaveFailure",
                hooks.on_save_failure,
                EntitySaveProps(
                    schema=schema,
                    collection_path=collection_path,
                    id=entity_id,
                    values=to_save,
                    status=status,
                    context=self.context,
                    error=e,
                ),
            )
            raise PersistenceError("save", collection_path, entity_id, e) from e

        self._transition(SaveState.SUCCEEDED)
        await run_post_commit_hook(
            "onSaveSuccess",
            hooks.on_save_success,
            EntitySaveProps(
                schema=schema,
                collection_path=collection_path,
                id=committed_id,
                values=dict(to_save),
                status=status,
                context=self.context,
            ),
        )

        return Entity(
            id=committed_id,
            reference=EntityReference(id=committed_id, path=collection_path),
            values=to_save,
        )


async def save_entity(
    context: AppContext,
    schema: EntitySchema,
    collection_path: str,
    values: Mapping[str, Any],
    status: EntityStatus,
    entity_id: str | None = None,
) -> Entity:
    """Run a fresh SavePipeline for one entity."""
    return await SavePipeline(context).run(schema, collection_path, values, status, entity_id)
