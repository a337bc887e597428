"""Field-level rule checks for projected values.

Checks each value against the rules declared on its property:
- required: Value must be present and non-empty
- min/max: Numeric bounds
- min_length/max_length: String length or array size bounds
- pattern: Regex that must match the whole string
- enum membership and unique array items

Type mismatches are reported by the projector before these checks run;
values of the wrong type are skipped here.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

from entitydesk.core.types import get_property_type
from entitydesk.schema.properties import Property
from entitydesk.values.types import UNSET, ValidationError

logger = logging.getLogger(__name__)


def is_empty(value: Any) -> bool:
    """Check if a value is considered empty."""
    if value is None or value is UNSET:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, tuple, dict)) and len(value) == 0:
        return True
    return False


def validate_values(
    values: Mapping[str, Any],
    properties: Mapping[str, Property],
) -> list[ValidationError]:
    """Check every property's rules against the projected values."""
    errors: list[ValidationError] = []
    for key, prop in properties.items():
        errors.extend(validate_value(prop, values.get(key, UNSET), key))
    return errors


def validate_value(prop: Property, value: Any, key_path: str) -> list[ValidationError]:
    """Check a single value, recursing into arrays and maps."""
    errors: list[ValidationError] = []
    rules = prop.validation
    label = prop.title or key_path

    if rules.required and is_empty(value):
        errors.append(ValidationError(
            message=f"{label} is required",
            code="REQUIRED",
            field=key_path,
        ))
        return errors

    # Optional and empty: nothing else to check
    if is_empty(value):
        return errors

    data_type = prop.data_type
    if not get_property_type(data_type).accepts(value):
        return errors

    if data_type == "number":
        if rules.min is not None and value < rules.min:
            errors.append(ValidationError(
                message=f"{label} must be at least {rules.min}",
                code="MIN_VALUE",
                field=key_path,
            ))
        if rules.max is not None and value > rules.max:
            errors.append(ValidationError(
                message=f"{label} must be at most {rules.max}",
                code="MAX_VALUE",
                field=key_path,
            ))

    elif data_type == "string":
        errors.extend(_check_length(value, prop, key_path, "characters"))
        if rules.pattern and not _matches(rules.pattern, value, key_path):
            errors.append(ValidationError(
                message=f"{label} does not match the expected format",
                code="PATTERN_MISMATCH",
                field=key_path,
            ))

    elif data_type == "enum":
        if value not in (prop.enum_values or {}):
            errors.append(ValidationError(
                message=f"{label} must be one of: {', '.join(map(str, prop.enum_values))}",
                code="INVALID_ENUM",
                field=key_path,
            ))

    elif data_type == "array":
        errors.extend(_check_length(value, prop, key_path, "items"))
        if rules.unique_in_array:
            seen: list[Any] = []
            for item in value:
                if item in seen:
                    errors.append(ValidationError(
                        message=f"{label} must not contain duplicates",
                        code="DUPLICATE_ITEM",
                        field=key_path,
                    ))
                    break
                seen.append(item)
        for index, item in enumerate(value):
            errors.extend(validate_value(prop.of, item, f"{key_path}[{index}]"))

    elif data_type == "map":
        for nested_key, nested_prop in (prop.properties or {}).items():
            errors.extend(validate_value(
                nested_prop, value.get(nested_key, UNSET), f"{key_path}.{nested_key}"
            ))

    return errors


def _matches(pattern: str, value: str, key_path: str) -> bool:
    """Match a pattern against the whole value.

    A malformed pattern is a schema bug, not a bad value: it is logged and
    the check is skipped.
    """
    try:
        return re.fullmatch(pattern, value) is not None
    except re.error as e:
        logger.warning("Invalid pattern %r for %s: %s", pattern, key_path, e)
        return True


def _check_length(
    value: Any, prop: Property, key_path: str, unit: str
) -> list[ValidationError]:
    """Validate length bounds for strings and arrays."""
    errors = []
    rules = prop.validation
    label = prop.title or key_path
    length = len(value)

    if rules.min_length is not None and length < rules.min_length:
        errors.append(ValidationError(
            message=f"{label} must be at least {rules.min_length} {unit}",
            code="MIN_LENGTH",
            field=key_path,
        ))

    if rules.max_length is not None and length > rules.max_length:
        errors.append(ValidationError(
            message=f"{label} must be at most {rules.max_length} {unit}",
            code="MAX_LENGTH",
            field=key_path,
        ))

    return errors
