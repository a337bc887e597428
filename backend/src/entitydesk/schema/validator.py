"""
JSON Schema validation for collection schema YAML files.

Usage:
    from entitydesk.schema.validator import validate_schema_dir

    issues = validate_schema_dir(Path("schemas"))
    for issue in issues:
        print(issue)
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "entity.schema.json"


@dataclass
class SchemaIssue:
    """A single validation finding for a schema YAML file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "properties/title"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


def _load_validator() -> Draft202012Validator:
    with _SCHEMA_PATH.open() as fh:
        return Draft202012Validator(json.load(fh))


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _check_defaults(yaml_path: Path, doc: dict[str, Any]) -> list[SchemaIssue]:
    """Warn about default values for keys that are not declared properties."""
    declared = doc.get("properties") or {}
    return [
        SchemaIssue(
            file=yaml_path,
            message=f"Default value for undeclared property '{key}'",
            path=f"defaultValues/{key}",
            severity="warning",
        )
        for key in (doc.get("defaultValues") or {})
        if key not in declared
    ]


def validate_schema_file(
    yaml_path: Path,
    *,
    validator: Draft202012Validator | None = None,
) -> list[SchemaIssue]:
    """
    Validate a single collection schema YAML file.

    Returns:
        A list of :class:`SchemaIssue` objects (empty on success).
    """
    try:
        with yaml_path.open() as fh:
            doc = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [SchemaIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if doc is None:
        return [
            SchemaIssue(file=yaml_path, message="File is empty or contains only whitespace")
        ]

    if validator is None:
        validator = _load_validator()

    issues = [
        SchemaIssue(file=yaml_path, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=lambda e: list(e.path))
    ]
    if isinstance(doc, dict):
        issues.extend(_check_defaults(yaml_path, doc))
    return issues


def validate_schema_dir(schemas_dir: Path, *, strict: bool = False) -> list[SchemaIssue]:
    """
    Validate all ``*.yaml`` files in *schemas_dir*.

    Args:
        schemas_dir: Directory of collection schema files.
        strict:      If ``True``, warnings are escalated to errors.

    Returns:
        A flat list of :class:`SchemaIssue` objects across all files.
    """
    if not schemas_dir.is_dir():
        return [
            SchemaIssue(
                file=schemas_dir,
                message=f"Schema directory does not exist: {schemas_dir}",
            )
        ]

    validator = _load_validator()
    all_issues: list[SchemaIssue] = []
    for yaml_file in sorted(schemas_dir.glob("*.yaml")):
        file_issues = validate_schema_file(yaml_file, validator=validator)
        if strict:
            for issue in file_issues:
                if issue.severity == "warning":
                    issue.severity = "error"
        all_issues.extend(file_issues)
    return all_issues
