"""entitydesk CLI entry point."""

import logging

import click


@click.group()
@click.option(
    "--log-level",
    envvar="ENTITYDESK_LOG_LEVEL",
    default="warning",
    show_default=True,
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Logging verbosity.",
)
def cli(log_level: str):
    """entitydesk: schema-driven entity console CLI."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommand groups
from entitydesk.cli.schema_cmd import schema  # noqa: E402

cli.add_command(schema)
