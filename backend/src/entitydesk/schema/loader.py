"""Load entity schemas from YAML files."""

import logging
from pathlib import Path
from typing import Any

import yaml

from entitydesk.core.types import get_property_type
from entitydesk.hooks.registry import HookRegistry
from entitydesk.schema.properties import Property
from entitydesk.schema.types import EntityHooks, EntitySchema

logger = logging.getLogger(__name__)

# YAML hook point -> EntityHooks attribute
HOOK_ATTRIBUTES = {
    "onPreSave": "on_pre_save",
    "onSaveSuccess": "on_save_success",
    "onSaveFailure": "on_save_failure",
    "onPreDelete": "on_pre_delete",
    "onDelete": "on_delete",
}

# ValidationRules attribute -> YAML key, for the unsupported-rule check
_RULE_KEYS = {
    "min": "min",
    "max": "max",
    "min_length": "minLength",
    "max_length": "maxLength",
    "pattern": "pattern",
    "unique_in_array": "uniqueInArray",
}


class SchemaLoader:
    """Loads collection schemas from ``*.yaml`` files in a directory.

    Each file declares one collection:

        collection: products
        name: Product
        customId: false
        properties:
          title: {dataType: string, validation: {required: true}}
          status: {dataType: enum, enumValues: {draft: Draft, published: Published}}
        defaultValues: {status: draft}
        hooks:
          onPreSave: stampUpdatedAt
    """

    def __init__(self, schemas_path: Path):
        self.schemas_path = schemas_path
        self.schemas: dict[str, EntitySchema] = {}

    def load_all(self) -> None:
        """Load every schema file in the directory."""
        if not self.schemas_path.exists():
            return

        for yaml_file in sorted(self.schemas_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if not data or "collection" not in data:
                continue
            collection = data["collection"]
            if collection in self.schemas:
                raise ValueError(
                    f"Collection '{collection}' is declared more than once ({yaml_file.name})"
                )
            self.schemas[collection] = self._resolve_schema(data)

    def _resolve_schema(self, data: dict[str, Any]) -> EntitySchema:
        """Convert a schema dict into an EntitySchema."""
        name = data.get("name", data["collection"])

        properties: dict[str, Property] = {}
        for key, prop_data in (data.get("properties") or {}).items():
            self._warn_unsupported_rules(name, key, prop_data)
            properties[key] = Property.from_dict(prop_data)

        default_values = data.get("defaultValues") or {}
        unknown = [key for key in default_values if key not in properties]
        if unknown:
            raise ValueError(
                f"Schema '{name}' has default values for undeclared properties: "
                f"{', '.join(unknown)}"
            )

        return EntitySchema(
            name=name,
            description=data.get("description"),
            custom_id=data.get("customId", False),
            properties=properties,
            default_values=default_values,
            hooks=self._resolve_hooks(name, data.get("hooks") or {}),
        )

    def _resolve_hooks(self, schema_name: str, data: dict[str, str]) -> EntityHooks:
        """Look up each named hook in the HookRegistry."""
        resolved: dict[str, Any] = {}
        for point, hook_name in data.items():
            attribute = HOOK_ATTRIBUTES.get(point)
            if attribute is None:
                raise ValueError(f"Schema '{schema_name}' declares unknown hook point '{point}'")
            try:
                resolved[attribute] = HookRegistry.resolve(hook_name, point)
            except ValueError as e:
                raise ValueError(f"Schema '{schema_name}' {point}: {e}") from e
        return EntityHooks(**resolved)

    def _warn_unsupported_rules(self, schema_name: str, key: str, data: dict[str, Any]) -> None:
        prop_type = get_property_type(data.get("dataType", "string"))
        rules = data.get("validation") or {}
        for rule, yaml_key in _RULE_KEYS.items():
            if yaml_key in rules and rule not in prop_type.rules:
                logger.warning(
                    "Schema '%s' property '%s': rule '%s' is ignored for %s properties",
                    schema_name,
                    key,
                    yaml_key,
                    prop_type.name,
                )

    def get_schema(self, collection: str) -> EntitySchema | None:
        """Get a loaded schema by collection path."""
        return self.schemas.get(collection)

    def list_collections(self) -> list[str]:
        """List all collection paths."""
        return list(self.schemas.keys())
