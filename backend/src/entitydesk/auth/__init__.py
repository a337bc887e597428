"""Authorization module for entitydesk."""

from entitydesk.auth.controller import AuthController
from entitydesk.auth.roles import (
    FULL_ACCESS,
    NO_ACCESS,
    OPERATIONS,
    Permissions,
    Role,
    can_perform,
    effective_roles,
    resolve_permissions,
    roles_from_dict,
)
from entitydesk.auth.types import (
    AuthDelegate,
    Authenticator,
    AuthenticatorParams,
    User,
)

__all__ = [
    "AuthController",
    "AuthDelegate",
    "Authenticator",
    "AuthenticatorParams",
    "User",
    "FULL_ACCESS",
    "NO_ACCESS",
    "OPERATIONS",
    "Permissions",
    "Role",
    "can_perform",
    "effective_roles",
    "resolve_permissions",
    "roles_from_dict",
]
