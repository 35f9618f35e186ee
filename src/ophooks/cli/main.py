"""ophooks CLI entry point."""

import click


@click.group()
def cli():
    """ophooks: operation hooks for GraphQL root resolvers."""
    pass


# Register subcommand groups
from ophooks.cli.schema_cmd import schema  # noqa: E402

cli.add_command(schema)
