"""Project stored records onto resolved property maps.

New and copied entities start from the schema's default values with the
caller's values layered on top. Existing entities start from the stored
record; properties missing from it are UNSET, never defaulted.

Every present value is coerced against its property's data type. A value
that does not fit is kept as-is and reported as a ValidationError so the
editing layer can show it.

Coercion can change a stored value's representation (an ISO string
becomes a datetime, "users/u1" becomes an EntityReference). For existing
records the stored form of each such value is kept on the result, and
serialize_values writes it back as long as the value was not edited, so
an unmodified record round-trips exactly.
"""

import copy
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from entitydesk.core.types import get_property_type
from entitydesk.schema.properties import Property
from entitydesk.schema.types import EntityReference, EntityStatus
from entitydesk.values.types import UNSET, ProjectionResult, ValidationError
from entitydesk.values.validation import validate_values

logger = logging.getLogger(__name__)


def project(
    raw: Mapping[str, Any] | None,
    properties: Mapping[str, Property],
    default_values: Mapping[str, Any] | None = None,
    status: EntityStatus = EntityStatus.EXISTING,
    overrides: Mapping[str, Any] | None = None,
) -> ProjectionResult:
    """Map a raw record onto the resolved properties.

    Args:
        raw: The stored record (existing entities), or None
        properties: Resolved property map; its key order is the output order
        default_values: Schema defaults, applied to new and copied entities only
        status: New, existing or copy
        overrides: Values supplied by the caller (e.g., copied-from values)

    Returns:
        ProjectionResult with the ordered values, any per-field issues and,
        for existing records, the stored form of every coerced value
    """
    existing = status is EntityStatus.EXISTING
    if existing:
        source = dict(raw or {})
    else:
        source = copy.deepcopy(dict(default_values or {}))
    if overrides:
        source.update(overrides)

    undeclared = [key for key in source if key not in properties]
    if undeclared:
        logger.debug("Dropping undeclared keys: %s", ", ".join(undeclared))

    errors: list[ValidationError] = []
    values: dict[str, Any] = {}
    stored_forms: dict[str, tuple[Any, Any]] = {}
    for key, prop in properties.items():
        if key not in source:
            values[key] = UNSET
            continue
        stored = source[key]
        coerced = coerce_value(prop, stored, key, errors)
        values[key] = coerced
        if existing and coerced is not stored and coerced != stored:
            stored_forms[key] = (coerced, copy.deepcopy(stored))

    errors.extend(validate_values(values, properties))
    return ProjectionResult(values=values, errors=errors, stored_forms=stored_forms)


def coerce_value(
    prop: Property,
    value: Any,
    key_path: str,
    errors: list[ValidationError],
) -> Any:
    """Coerce a value to its property's data type.

    Appends to ``errors`` and returns the raw value when it does not fit.
    """
    if value is None or value is UNSET:
        return value

    data_type = prop.data_type
    prop_type = get_property_type(data_type)

    if prop_type.accepts(value):
        if data_type == "array":
            return [
                coerce_value(prop.of, item, f"{key_path}[{index}]", errors)
                for index, item in enumerate(value)
            ]
        if data_type == "map":
            return _coerce_map(prop, value, key_path, errors)
        return value

    if data_type == "date" and isinstance(value, str):
        parsed = _parse_datetime(value)
        if parsed is not None:
            return parsed

    elif data_type == "reference":
        if isinstance(value, EntityReference):
            return value
        if isinstance(value, Mapping) and "id" in value and "path" in value:
            return EntityReference(id=str(value["id"]), path=str(value["path"]))
        if isinstance(value, str):
            try:
                return EntityReference.parse(value)
            except ValueError:
                pass

    errors.append(ValidationError(
        message=f"{prop.title or key_path} must be a {data_type}, got {type(value).__name__}",
        code="INVALID_TYPE",
        field=key_path,
    ))
    return value


def _coerce_map(
    prop: Property,
    value: Mapping[str, Any],
    key_path: str,
    errors: list[ValidationError],
) -> dict[str, Any]:
    nested = prop.properties or {}
    result: dict[str, Any] = {}
    for nested_key, nested_prop in nested.items():
        if nested_key in value:
            result[nested_key] = coerce_value(
                nested_prop, value[nested_key], f"{key_path}.{nested_key}", errors
            )
    # Maps are open: undeclared nested keys pass through
    for nested_key, nested_value in value.items():
        if nested_key not in nested:
            result[nested_key] = nested_value
    return result


def serialize_values(
    values: Mapping[str, Any],
    stored_forms: Mapping[str, tuple[Any, Any]] | None = None,
) -> dict[str, Any]:
    """Turn projected values back into a plain record, dropping UNSET entries.

    Args:
        values: Projected (possibly edited) values
        stored_forms: ProjectionResult.stored_forms; a value still equal to
            its coerced form is written back in its stored representation

    Returns:
        The record to hand to the data source
    """
    stored_forms = stored_forms or {}
    record: dict[str, Any] = {}
    for key, value in values.items():
        if value is UNSET:
            continue
        form = stored_forms.get(key)
        if form is not None and value == form[0]:
            record[key] = copy.deepcopy(form[1])
        else:
            record[key] = _serialize(value)
    return record


def _serialize(value: Any) -> Any:
    if isinstance(value, Mapping):
        return serialize_values(value)
    if isinstance(value, list):
        return [_serialize(item) for item in value if item is not UNSET]
    return value


def _parse_datetime(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None
