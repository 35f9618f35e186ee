"""Schema CLI commands: check and print."""

from pathlib import Path

import click
from graphql import print_schema

from ophooks.config import DEFAULT_CONFIG_FILE, ProjectConfig
from ophooks.hooks.errors import ValidationError
from ophooks.hooks.validator import root_types

config_option = click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    type=click.Path(path_type=Path),
    help="Project config file.",
)


def _build(config_path: Path):
    """Load the project config and build its schema, exiting 1 on failure."""
    try:
        config = ProjectConfig.load(config_path)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    try:
        return config.build()
    except ValidationError as e:
        click.echo(click.style("Operation hooks were not added to:", fg="red"), err=True)
        for identifier in e.fields:
            click.echo(click.style(f"  ✗ {identifier}", fg="red"), err=True)
        raise SystemExit(1)
    except Exception as e:
        click.echo(click.style(f"Schema build failed: {e}", fg="red"), err=True)
        raise SystemExit(1)


@click.group()
def schema():
    """Schema commands."""
    pass


@schema.command()
@config_option
def check(config_path: Path):
    """Build the schema and verify every root field has operation hooks."""
    built = _build(config_path)

    identifiers = [
        f"{root_type.name}.{field_name}"
        for root_type in root_types(built)
        for field_name in root_type.fields
    ]
    click.echo(f"Wrapped {len(identifiers)} root field(s):")
    for identifier in identifiers:
        click.echo(f"  ✓ {identifier}")

    click.echo(click.style("\nAll root fields have operation hooks.", fg="green", bold=True))


@schema.command("print")
@config_option
def print_cmd(config_path: Path):
    """Print the built schema as SDL."""
    built = _build(config_path)
    click.echo(print_schema(built))
