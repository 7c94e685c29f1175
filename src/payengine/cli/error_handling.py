"""CLI error handling helpers."""

import click


def handle_fatal_error(ctx: click.Context, error: Exception) -> None:
    """Render an error that aborts the run and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
