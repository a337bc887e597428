"""Types produced by entity value projection."""

from dataclasses import dataclass, field
from typing import Any


class _Unset:
    """Marker for a property with no value at all (distinct from None)."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __copy__(self) -> "_Unset":
        return self

    def __deepcopy__(self, memo: dict) -> "_Unset":
        return self


UNSET: Any = _Unset()


@dataclass(frozen=True)
class ValidationError:
    """A single per-field validation issue.

    Attributes:
        message: Human-readable message
        code: Machine-readable code (e.g., "INVALID_TYPE", "REQUIRED")
        field: Dotted key path of the offending value
    """

    message: str
    code: str
    field: str

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "code": self.code, "field": self.field}


@dataclass
class ProjectionResult:
    """Values projected onto a resolved property map plus the issues found.

    Attributes:
        values: Ordered by the resolved property map's key order
        errors: Non-fatal per-field issues
        stored_forms: Key -> (coerced value, stored value) for existing
            record values whose representation coercion changed
    """

    values: dict[str, Any]
    errors: list[ValidationError] = field(default_factory=list)
    stored_forms: dict[str, tuple[Any, Any]] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors

    def errors_for(self, key: str) -> list[ValidationError]:
        """Issues reported for a property key (including nested paths)."""
        return [
            e for e in self.errors
            if e.field == key or e.field.startswith(f"{key}.") or e.field.startswith(f"{key}[")
        ]
