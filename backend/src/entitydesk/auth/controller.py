"""Session-scoped authorization controller.

Reacts to identity changes emitted by the authentication delegate and
decides whether the current principal may use the console. Derived state
(can_access_main_view, effective roles, initial_loading) is recomputed from
primitive state on every read and never stored.

Each identity change starts a new epoch. A decision that completes after
a newer identity change belongs to a superseded epoch and is discarded,
whatever order the decisions complete in.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from entitydesk.auth.roles import Permissions, Role, can_perform, effective_roles, resolve_permissions
from entitydesk.auth.types import AuthDelegate, Authenticator, AuthenticatorParams, User
from entitydesk.errors import AuthorizationDenied
from entitydesk.hooks.service import call_hook

if TYPE_CHECKING:
    from entitydesk.datasource.adapter import DataSource
    from entitydesk.storage import StorageSource

logger = logging.getLogger(__name__)


class AuthController:
    """Authorization state for one session.

    Args:
        delegate: The authentication collaborator
        authentication: None or True (enabled, no decision function),
            False (disabled), or a decision function
        roles: Role registry keyed by role id; None disables role checks
        date_time_format, locale, data_source, storage_source: Forwarded to
            the decision function
    """

    def __init__(
        self,
        delegate: AuthDelegate,
        authentication: bool | Authenticator | None = None,
        roles: Mapping[str, Role] | None = None,
        date_time_format: str | None = None,
        locale: str | None = None,
        data_source: DataSource | None = None,
        storage_source: StorageSource | None = None,
    ):
        self.delegate = delegate
        self.authentication = authentication
        self.role_registry = roles
        self.date_time_format = date_time_format
        self.locale = locale
        self.data_source = data_source
        self.storage_source = storage_source
        self.extra: Any = None

        self._user: User | None = None
        self._role_ids: list[str] | None = None
        self._auth_loading = False
        self._not_allowed_error: Any = False
        self._auth_verified = not self.authentication_enabled
        self._epoch = 0
        self._unsubscribe: Callable[[], None] | None = None

    # -- Primitive state (read-only) -------------------------------------

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def auth_loading(self) -> bool:
        return self._auth_loading

    @property
    def not_allowed_error(self) -> Any:
        """False, True (decision returned falsy) or the exception the decision raised."""
        return self._not_allowed_error

    @property
    def auth_verified(self) -> bool:
        return self._auth_verified

    @property
    def login_skipped(self) -> bool:
        return bool(self.delegate.login_skipped)

    @property
    def authentication_enabled(self) -> bool:
        return self.authentication is None or bool(self.authentication)

    # -- Derived state ----------------------------------------------------

    @property
    def can_access_main_view(self) -> bool:
        return (
            not self.authentication_enabled
            or self._user is not None
            or self.login_skipped
        ) and not self._not_allowed_error

    @property
    def initial_loading(self) -> bool:
        return not self._auth_verified or bool(self.delegate.initial_loading)

    @property
    def roles(self) -> list[Role] | None:
        """Effective roles, or None when no role registry is configured."""
        return effective_roles(self._role_ids, self.role_registry)

    def set_roles(self, role_ids: Iterable[str] | None) -> None:
        """Replace the current user's raw role ids."""
        self._role_ids = list(role_ids) if role_ids is not None else None

    def permissions_for(self, collection_path: str) -> Permissions:
        return resolve_permissions(self.roles, collection_path)

    def can(self, operation: str, collection_path: str) -> bool:
        """Check if the effective roles allow an operation on a collection."""
        return can_perform(self.roles, operation, collection_path)

    def require_access(self) -> None:
        """Raise AuthorizationDenied unless the main view is accessible."""
        if not self.can_access_main_view:
            if isinstance(self._not_allowed_error, BaseException):
                raise AuthorizationDenied(str(self._not_allowed_error)) from self._not_allowed_error
            raise AuthorizationDenied("Not allowed to access the main view")

    # -- Lifecycle --------------------------------------------------------

    async def start(self) -> None:
        """Subscribe to identity changes and evaluate the current identity."""
        if self._unsubscribe is None:
            self._unsubscribe = self.delegate.subscribe(self.handle_identity_change)
        await self.handle_identity_change(self.delegate.user)

    def close(self) -> None:
        """Stop reacting to identity changes (session teardown)."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        # Any decision still pending belongs to a dead session
        self._epoch += 1

    async def __aenter__(self) -> AuthController:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()

    async def sign_out(self) -> None:
        result = self.delegate.sign_out()
        if inspect.isawaitable(result):
            await result

    async def handle_identity_change(self, identity: User | None) -> None:
        """React to the delegate's current identity.

        Args:
            identity: The new identity, or None after sign-out
        """
        self._epoch += 1
        epoch = self._epoch

        if callable(self.authentication) and identity is not None:
            await self._evaluate(identity, epoch)
            return

        self._user = identity
        self._auth_loading = False
        self._auth_verified = True
        logger.debug("Identity committed without decision: %s", identity.uid if identity else None)

    async def _evaluate(self, identity: User, epoch: int) -> None:
        self._auth_loading = True
        params = AuthenticatorParams(
            user=identity,
            auth_controller=self,
            date_time_format=self.date_time_format,
            locale=self.locale,
            data_source=self.data_source,
            storage_source=self.storage_source,
        )

        try:
            allowed = await call_hook(self.authentication, params)
        except Exception as e:
            if epoch != self._epoch:
                logger.debug("Discarding failed decision for superseded identity %s", identity.uid)
                return
            logger.warning("Authentication decision raised for %s: %s", identity.uid, e)
            self._user = None
            self._not_allowed_error = e
            self._finish_evaluation()
            # An erroring gate must not leave a half-authorized session
            await self.sign_out()
            return

        if epoch != self._epoch:
            logger.debug("Discarding decision for superseded identity %s", identity.uid)
            return

        if allowed:
            self._user = identity
            self._not_allowed_error = False
        else:
            logger.info("User %s is not allowed to access the console", identity.uid)
            self._user = None
            self._not_allowed_error = True
        self._finish_evaluation()

    def _finish_evaluation(self) -> None:
        self._auth_verified = True
        self._auth_loading = False
