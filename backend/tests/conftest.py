"""Shared fixtures for entitydesk tests."""

import pytest

from entitydesk.auth.types import User
from entitydesk.context import AppContext
from entitydesk.datasource.memory import InMemoryDataSource
from entitydesk.hooks.registry import HookRegistry
from entitydesk.schema.properties import Property, ValidationRules
from entitydesk.schema.types import EntitySchema


class FakeAuthDelegate:
    """Authentication delegate double that records sign-outs."""

    def __init__(self, user: User | None = None, login_skipped: bool = False):
        self.user = user
        self.login_skipped = login_skipped
        self.initial_loading = False
        self.sign_out_calls = 0
        self.listeners = []

    def subscribe(self, listener):
        self.listeners.append(listener)

        def unsubscribe():
            self.listeners.remove(listener)

        return unsubscribe

    def sign_out(self):
        self.sign_out_calls += 1
        self.user = None

    async def emit(self, user: User | None) -> None:
        self.user = user
        for listener in list(self.listeners):
            await listener(user)


@pytest.fixture(autouse=True)
def clear_hook_registry():
    """Clear hook registry before and after each test."""
    HookRegistry.clear()
    yield
    HookRegistry.clear()


@pytest.fixture
def data_source():
    return InMemoryDataSource()


@pytest.fixture
def context(data_source):
    return AppContext(data_source=data_source)


@pytest.fixture
def product_schema():
    """A schema with a generated id and a draft default."""
    return EntitySchema(
        name="Product",
        properties={
            "title": Property("string", title="Title", validation=ValidationRules(required=True)),
            "status": Property("enum", enum_values={"draft": "Draft", "published": "Published"}),
        },
        default_values={"status": "draft"},
    )


@pytest.fixture
def alice():
    return User(uid="alice", email="alice@example.com")


@pytest.fixture
def bob():
    return User(uid="bob", email="bob@example.com")


@pytest.fixture
def delegate():
    return FakeAuthDelegate()
