"""Named lifecycle hooks for declarative schemas.

YAML schemas attach hooks by name (``hooks: {onPreSave: stampUpdatedAt}``).
Each name is registered once, together with the hook points it may be
attached to, so a hook written as a delete gate cannot silently end up
transforming values in onPreSave.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

# Hook function signature: (EntitySaveProps | EntityDeleteProps) -> result,
# either directly or as an awaitable
HookFn = Callable[[Any], Any]

HOOK_POINTS = ("onPreSave", "onSaveSuccess", "onSaveFailure", "onPreDelete", "onDelete")


@dataclass(frozen=True)
class HookRegistration:
    """A named hook and the hook points it may be attached to."""

    name: str
    fn: HookFn
    points: frozenset[str]


def _normalize_points(points: Iterable[str] | None) -> frozenset[str]:
    if points is None:
        return frozenset(HOOK_POINTS)
    normalized = frozenset(points)
    unknown = sorted(normalized.difference(HOOK_POINTS))
    if unknown:
        raise ValueError(
            f"Unknown hook point(s): {', '.join(unknown)}. "
            f"Expected one of: {', '.join(HOOK_POINTS)}"
        )
    if not normalized:
        raise ValueError("A hook must be allowed at one or more hook points")
    return normalized


class HookRegistry:
    """Process-wide table of named hooks.

    Registration normally happens at import time through the @hook
    decorator. Registering the same function under the same name again is
    a no-op (modules may be imported more than once); binding a name to a
    different function is an error.
    """

    _registrations: dict[str, HookRegistration] = {}

    @classmethod
    def register(
        cls,
        name: str,
        hook_fn: HookFn,
        points: Iterable[str] | None = None,
    ) -> HookRegistration:
        """Register a hook function by name.

        Args:
            name: Name used by schemas to reference the hook
            hook_fn: Function or coroutine function implementing the hook
            points: Hook points the hook may be attached to (default: all)

        Raises:
            ValueError: Unknown hook point, or the name is taken by another function
        """
        registration = HookRegistration(name=name, fn=hook_fn, points=_normalize_points(points))
        existing = cls._registrations.get(name)
        if existing is not None:
            if existing == registration:
                return existing
            raise ValueError(f"Hook '{name}' is already registered to a different function")
        cls._registrations[name] = registration
        return registration

    @classmethod
    def resolve(cls, name: str, point: str) -> HookFn:
        """Look up the hook a schema attaches at a hook point.

        Raises:
            ValueError: The point is unknown, the name is not registered, or
                the hook does not allow that point
        """
        if point not in HOOK_POINTS:
            raise ValueError(f"Unknown hook point '{point}'")
        registration = cls._registrations.get(name)
        if registration is None:
            raise ValueError(
                f"Hook '{name}' is not registered. "
                "Import the module that defines it before loading schemas."
            )
        if point not in registration.points:
            allowed = ", ".join(p for p in HOOK_POINTS if p in registration.points)
            raise ValueError(f"Hook '{name}' cannot be used for {point} (allowed: {allowed})")
        return registration.fn

    @classmethod
    def clear(cls) -> None:
        """Drop all registrations. Used by tests."""
        cls._registrations.clear()


def hook(name: str, points: Iterable[str] | None = None) -> Callable[[HookFn], HookFn]:
    """Decorator to register a hook function.

    Usage:
        @hook("rejectLocked", points=["onPreDelete"])
        def reject_locked(props: EntityDeleteProps) -> None:
            if props.entity.values.get("locked"):
                raise ValueError("locked")
    """

    def decorator(fn: HookFn) -> HookFn:
        HookRegistry.register(name, fn, points)
        return fn

    return decorator
