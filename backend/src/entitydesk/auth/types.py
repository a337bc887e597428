"""Type definitions for authentication and authorization."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from entitydesk.auth.controller import AuthController
    from entitydesk.datasource.adapter import DataSource
    from entitydesk.storage import StorageSource


@dataclass(frozen=True)
class User:
    """An identity emitted by the authentication delegate.

    Attributes:
        uid: Stable user id from the identity provider
        email: User's email address
        display_name: User's display name
        photo_url: Avatar URL
        provider_id: Identity provider (e.g., "password", "google.com")
        claims: Extra claims from the provider
    """

    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    provider_id: str | None = None
    claims: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


IdentityListener = Callable[["User | None"], Awaitable[None]]


@runtime_checkable
class AuthDelegate(Protocol):
    """The authentication collaborator.

    Emits the current identity and notifies subscribers on every change,
    including sign-out (identity becomes None). Listeners are coroutine
    functions; the delegate awaits or schedules them.
    """

    user: User | None
    login_skipped: bool
    initial_loading: bool

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        ...

    def sign_out(self) -> Any:
        """Sign the current identity out. May return an awaitable."""
        ...


@dataclass
class AuthenticatorParams:
    """Arguments passed to an authentication decision function."""

    user: User
    auth_controller: AuthController
    date_time_format: str | None = None
    locale: str | None = None
    data_source: DataSource | None = None
    storage_source: StorageSource | None = None


# Decision function: returns (or resolves to) whether the user may sign in
Authenticator = Callable[[AuthenticatorParams], "bool | Awaitable[bool]"]
