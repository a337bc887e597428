"""Tests for the delete pipeline state machine."""

import logging
from unittest.mock import AsyncMock

import pytest

from entitydesk.auth.controller import AuthController
from entitydesk.auth.roles import Permissions, Role
from entitydesk.context import AppContext
from entitydesk.datasource.memory import InMemoryDataSource
from entitydesk.errors import AuthorizationDenied, PersistenceError, PreDeleteAborted
from entitydesk.lifecycle.delete import DeletePipeline, DeleteState, delete_entity
from entitydesk.schema.types import Entity, EntityHooks, EntityReference, EntitySchema


def make_schema(product_schema: EntitySchema, **hooks) -> EntitySchema:
    return EntitySchema(
        name=product_schema.name,
        properties=product_schema.properties,
        hooks=EntityHooks(**hooks),
    )


LAMP = {"title": "Lamp", "status": "draft"}


@pytest.fixture
def data_source():
    return InMemoryDataSource({"products": {"p1": LAMP}})


@pytest.fixture
def stored_entity():
    return Entity(id="p1", reference=EntityReference(id="p1", path="products"), values=dict(LAMP))


class TestSuccessfulDelete:
    @pytest.mark.asyncio
    async def test_removes_record(self, context, data_source, product_schema, stored_entity):
        pipeline = DeletePipeline(context)
        await pipeline.run(product_schema, stored_entity)

        assert await data_source.get("products", "p1") is None
        assert pipeline.transitions == [
            DeleteState.IDLE,
            DeleteState.PRE_DELETING,
            DeleteState.DELETING,
            DeleteState.SUCCEEDED,
        ]

    @pytest.mark.asyncio
    async def test_hooks_receive_entity(self, context, product_schema, stored_entity):
        on_pre_delete = AsyncMock()
        on_delete = AsyncMock()
        schema = make_schema(product_schema, on_pre_delete=on_pre_delete, on_delete=on_delete)

        await delete_entity(context, schema, stored_entity)

        on_pre_delete.assert_awaited_once()
        props = on_delete.await_args.args[0]
        assert props.entity == stored_entity
        assert props.id == "p1"
        assert props.collection_path == "products"
        assert props.context is context

    @pytest.mark.asyncio
    async def test_on_delete_failure_does_not_restore(
        self, context, data_source, product_schema, stored_entity, caplog
    ):
        def broken(props):
            raise RuntimeError("audit log down")

        schema = make_schema(product_schema, on_delete=broken)
        pipeline = DeletePipeline(context)
        with caplog.at_level(logging.ERROR):
            await pipeline.run(schema, stored_entity)

        assert pipeline.state is DeleteState.SUCCEEDED
        assert await data_source.get("products", "p1") is None
        assert "onDelete hook failed" in caplog.text


class TestAbortedDelete:
    @pytest.mark.asyncio
    async def test_pre_delete_error_keeps_record(self, context, data_source, product_schema, stored_entity):
        def locked(props):
            raise PermissionError("locked")

        on_delete = AsyncMock()
        schema = make_schema(product_schema, on_pre_delete=locked, on_delete=on_delete)
        pipeline = DeletePipeline(context)

        with pytest.raises(PreDeleteAborted, match="locked") as exc_info:
            await pipeline.run(schema, stored_entity)

        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert pipeline.state is DeleteState.ABORTED
        assert await data_source.get("products", "p1") == LAMP
        assert data_source.delete_count == 0
        on_delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_permission_denied(self, data_source, delegate, product_schema, stored_entity):
        controller = AuthController(delegate, roles={"viewer": Role(id="viewer", default_permissions=Permissions(read=True))})
        controller.set_roles(["viewer"])
        pipeline = DeletePipeline(AppContext(data_source=data_source, auth_controller=controller))

        with pytest.raises(AuthorizationDenied):
            await pipeline.run(product_schema, stored_entity)
        assert pipeline.transitions == [DeleteState.IDLE, DeleteState.ABORTED]
        assert await data_source.get("products", "p1") is not None


class TestFailedDelete:
    @pytest.mark.asyncio
    async def test_missing_document_fails(self, context, product_schema):
        on_delete = AsyncMock()
        schema = make_schema(product_schema, on_delete=on_delete)
        ghost = Entity(id="nope", reference=EntityReference(id="nope", path="products"), values={})
        pipeline = DeletePipeline(context)

        with pytest.raises(PersistenceError) as exc_info:
            await pipeline.run(schema, ghost)

        assert exc_info.value.operation == "delete"
        assert isinstance(exc_info.value.__cause__, KeyError)
        assert pipeline.state is DeleteState.FAILED
        on_delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_pipeline_cannot_run_twice(self, context, product_schema, stored_entity):
        pipeline = DeletePipeline(context)
        await pipeline.run(product_schema, stored_entity)
        with pytest.raises(RuntimeError, match="only run once"):
            await pipeline.run(product_schema, stored_entity)
