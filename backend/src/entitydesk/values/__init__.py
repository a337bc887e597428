"""Entity value projection: defaults, coercion and per-field checks."""

from entitydesk.values.projector import coerce_value, project, serialize_values
from entitydesk.values.types import UNSET, ProjectionResult, ValidationError
from entitydesk.values.validation import is_empty, validate_value, validate_values

__all__ = [
    "UNSET",
    "ProjectionResult",
    "ValidationError",
    "coerce_value",
    "is_empty",
    "project",
    "serialize_values",
    "validate_value",
    "validate_values",
]
