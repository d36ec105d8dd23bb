"""formforge CLI entry point."""

import logging

import click

from formforge.config import EngineConfig
from formforge.core.field_types import field_types_by_category


@click.group()
def cli():
    """formforge: form field validation CLI."""
    config = EngineConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command("field-types")
def field_types():
    """List supported field types by category."""
    for category, types in field_types_by_category().items():
        click.echo(click.style(category, bold=True))
        for field_type in types:
            click.echo(f"  {field_type.value}")


# Register subcommand groups
from formforge.cli.form_cmd import form  # noqa: E402

cli.add_command(form)
