"""Delete pipeline.

States:
    IDLE -> PRE_DELETING -> DELETING -> SUCCEEDED | FAILED
    IDLE -> PRE_DELETING -> ABORTED

onPreDelete is a gate, not a transform: raising aborts before the data
source is touched. onDelete fires only after a successful delete and is
best-effort. Failures are not retried here.
"""

from enum import Enum

from entitydesk.context import AppContext
from entitydesk.errors import PersistenceError, PreDeleteAborted
from entitydesk.hooks.service import call_hook, run_post_commit_hook
from entitydesk.lifecycle.base import Pipeline
from entitydesk.schema.types import Entity, EntityDeleteProps, EntitySchema


class DeleteState(Enum):
    IDLE = "idle"
    PRE_DELETING = "preDeleting"
    DELETING = "deleting"
    SUCCEEDED = "succeeded"
    ABORTED = "aborted"
    FAILED = "failed"


class DeletePipeline(Pipeline[DeleteState]):
    """Orchestrates one delete attempt for one entity."""

    IDLE = DeleteState.IDLE
    ABORTED = DeleteState.ABORTED
    TERMINAL = frozenset({DeleteState.SUCCEEDED, DeleteState.ABORTED, DeleteState.FAILED})

    async def run(self, schema: EntitySchema, entity: Entity) -> None:
        """Delete an entity.

        Raises:
            AuthorizationDenied: The session's roles forbid the operation
            PreDeleteAborted: onPreDelete raised; nothing was deleted
            PersistenceError: The data source delete failed
        """
        self._start()
        collection_path = entity.collection_path
        self._check_permission("delete", collection_path)

        props = EntityDeleteProps(
            schema=schema,
            collection_path=collection_path,
            id=entity.id,
            entity=entity,
            context=self.context,
        )
        hooks = schema.hooks

        # PRE_DELETING
        self._transition(DeleteState.PRE_DELETING)
        if hooks.on_pre_delete is not None:
            try:
                await call_hook(hooks.on_pre_delete, props)
            except Exception as e:
                self._transition(DeleteState.ABORTED)
                raise PreDeleteAborted(
                    f"onPreDelete blocked deleting '{collection_path}/{entity.id}': {e}"
                ) from e

        # DELETING
        self._transition(DeleteState.DELETING)
        try:
            await self.context.data_source.delete(collection_path, entity.id)
        except Exception as e:
            self._transition(DeleteState.FAILED)
            raise PersistenceError("delete", collection_path, entity.id, e) from e

        self._transition(DeleteState.SUCCEEDED)
        await run_post_commit_hook("onDelete", hooks.on_delete, props)


async def delete_entity(context: AppContext, schema: EntitySchema, entity: Entity) -> None:
    """Run a fresh DeletePipeline for one entity."""
    await DeletePipeline(context).run(schema, entity)
