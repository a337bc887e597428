"""Role registry and permission checks for entity mutations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

OPERATIONS = ("read", "create", "update", "delete")


@dataclass(frozen=True)
class Permissions:
    """What a role may do within a scope."""

    read: bool = False
    create: bool = False
    update: bool = False
    delete: bool = False

    def allows(self, operation: str) -> bool:
        if operation not in OPERATIONS:
            raise ValueError(f"Unknown operation '{operation}'")
        return getattr(self, operation)

    def merge(self, other: Permissions) -> Permissions:
        """Union of two permission sets."""
        return Permissions(
            read=self.read or other.read,
            create=self.create or other.create,
            update=self.update or other.update,
            delete=self.delete or other.delete,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Permissions:
        data = data or {}
        return cls(
            read=bool(data.get("read", False)),
            create=bool(data.get("create", False)),
            # "edit" is accepted as an alias for update
            update=bool(data.get("update", data.get("edit", False))),
            delete=bool(data.get("delete", False)),
        )


FULL_ACCESS = Permissions(read=True, create=True, update=True, delete=True)
NO_ACCESS = Permissions()


@dataclass(frozen=True)
class Role:
    """A named set of permissions.

    Attributes:
        id: Registry key
        is_admin: Admin roles are granted every operation everywhere
        default_permissions: Applies to collections without an override
        collection_permissions: Per collection path overrides
    """

    id: str
    is_admin: bool = False
    default_permissions: Permissions = NO_ACCESS
    collection_permissions: Mapping[str, Permissions] = field(default_factory=dict)

    def permissions_for(self, collection_path: str) -> Permissions:
        if self.is_admin:
            return FULL_ACCESS
        return self.collection_permissions.get(collection_path, self.default_permissions)

    @classmethod
    def from_dict(cls, role_id: str, data: Mapping[str, Any]) -> Role:
        """Create a Role from its declarative form.

        Example:
            {"isAdmin": false,
             "defaultPermissions": {"read": true},
             "collectionPermissions": {"products": {"read": true, "edit": true}}}
        """
        return cls(
            id=role_id,
            is_admin=bool(data.get("isAdmin", False)),
            default_permissions=Permissions.from_dict(data.get("defaultPermissions")),
            collection_permissions={
                path: Permissions.from_dict(perms)
                for path, perms in (data.get("collectionPermissions") or {}).items()
            },
        )


def roles_from_dict(data: Mapping[str, Mapping[str, Any]]) -> dict[str, Role]:
    """Build a role registry from a mapping of role id to declarative role."""
    return {role_id: Role.from_dict(role_id, role_data) for role_id, role_data in data.items()}


def effective_roles(
    role_ids: Iterable[str] | None,
    registry: Mapping[str, Role] | None,
) -> list[Role] | None:
    """Look up a user's role ids in the registry.

    Unknown ids are dropped rather than treated as an error.

    Returns:
        The resolved roles, or None when no registry is configured
    """
    if registry is None:
        return None
    if not role_ids:
        return []

    resolved: list[Role] = []
    for role_id in role_ids:
        role = registry.get(role_id)
        if role is None:
            logger.debug("Dropping unknown role id '%s'", role_id)
            continue
        resolved.append(role)
    return resolved


def resolve_permissions(roles: Iterable[Role] | None, collection_path: str) -> Permissions:
    """Union of every role's permissions for a collection.

    With no role registry (roles is None) everything is allowed.
    """
    if roles is None:
        return FULL_ACCESS
    result = NO_ACCESS
    for role in roles:
        result = result.merge(role.permissions_for(collection_path))
    return result


def can_perform(roles: Iterable[Role] | None, operation: str, collection_path: str) -> bool:
    """Check if the roles allow an operation on a collection."""
    return resolve_permissions(roles, collection_path).allows(operation)
