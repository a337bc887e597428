"""Schema CLI commands: validate and show."""

import importlib
import os
from pathlib import Path

import click

from entitydesk.schema.loader import SchemaLoader
from entitydesk.schema.resolver import resolve_properties
from entitydesk.schema.validator import validate_schema_dir, validate_schema_file


def _resolve_schemas_dir(schemas_dir: Path | None) -> Path:
    """Resolve the schemas directory from the option, env, or cwd."""
    if schemas_dir is not None:
        return schemas_dir
    env_dir = os.environ.get("ENTITYDESK_SCHEMAS_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.cwd() / "schemas"


def _import_hooks(modules: tuple[str, ...]) -> None:
    """Import modules whose @hook decorators register named hooks."""
    for module in modules:
        importlib.import_module(module)


schemas_dir_option = click.option(
    "--schemas-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory of collection schema YAML files (default: ./schemas).",
)
hooks_option = click.option(
    "--hooks-module",
    "hooks_modules",
    multiple=True,
    help="Module to import for hook registration (repeatable).",
)


@click.group()
def schema():
    """Collection schema commands."""
    pass


@schema.command()
@schemas_dir_option
@hooks_option
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
@click.option(
    "--path",
    "target_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Validate a single YAML file instead of the whole directory.",
)
def validate(
    schemas_dir: Path | None,
    hooks_modules: tuple[str, ...],
    strict: bool,
    target_path: Path | None,
):
    """Validate collection schema YAML files."""
    schemas_path = _resolve_schemas_dir(schemas_dir)

    # ── JSON Schema validation ─────────────────────────────────────────────
    if target_path is not None:
        issues = validate_schema_file(target_path)
        if strict:
            for issue in issues:
                issue.severity = "error"
    else:
        if not schemas_path.exists():
            click.echo(f"Error: Schema directory not found at {schemas_path}", err=True)
            raise SystemExit(1)
        issues = validate_schema_dir(schemas_path, strict=strict)

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} schema error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(click.style(f"{len(warnings)} warning(s) found.", fg="yellow"))

    # ── Semantic (loader) validation ───────────────────────────────────────
    if target_path is None:
        _import_hooks(hooks_modules)
        try:
            loader = SchemaLoader(schemas_path)
            loader.load_all()
        except Exception as e:
            click.echo(click.style(f"\nSemantic validation failed: {e}", fg="red"), err=True)
            raise SystemExit(1)

        for collection in loader.list_collections():
            loaded = loader.get_schema(collection)
            click.echo(f"  {collection}: {loaded.name} ({len(loaded.properties)} properties)")

    click.echo(click.style("All schemas are valid.", fg="green"))


@schema.command()
@schemas_dir_option
@hooks_option
@click.argument("collection")
def show(schemas_dir: Path | None, hooks_modules: tuple[str, ...], collection: str):
    """Show the resolved properties of a collection schema."""
    _import_hooks(hooks_modules)
    loader = SchemaLoader(_resolve_schemas_dir(schemas_dir))
    try:
        loader.load_all()
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    entity_schema = loader.get_schema(collection)
    if entity_schema is None:
        click.echo(f"Error: Unknown collection '{collection}'", err=True)
        raise SystemExit(1)

    properties = resolve_properties(entity_schema, entity_schema.default_values, None, collection)

    click.echo(f"{entity_schema.name} ({collection})")
    if entity_schema.description:
        click.echo(f"  {entity_schema.description}")
    click.echo(f"  customId: {entity_schema.custom_id}")
    for key, prop in properties.items():
        flags = []
        if prop.validation.required:
            flags.append("required")
        if prop.read_only:
            flags.append("readOnly")
        if key in entity_schema.default_values:
            flags.append(f"default={entity_schema.default_values[key]!r}")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(f"  - {key}: {prop.data_type}{suffix}")
