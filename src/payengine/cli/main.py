"""Main CLI entry point."""

import logging
import sys

import click
from sqlalchemy.exc import SQLAlchemyError

from payengine.cli.error_handling import handle_fatal_error
from payengine.database.factories import DATABASE_URL_ENV, create_store

# Import and register all commands at module level
from payengine.cli.commands import process

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--database-url",
    help=f"SQLAlchemy URL for the ledger store (overrides {DATABASE_URL_ENV}; default: in memory)",
    envvar=DATABASE_URL_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="PAYENGINE_LOG_LEVEL",
    help="Diagnostics written to stderr",
)
@click.pass_context
def cli(ctx, database_url: str | None, log_level: str):
    """payengine - Client account ledger for transaction streams.

    Applies deposits, withdrawals, disputes, resolutions and chargebacks
    in order and reports the resulting state of every client account.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )

    # Initialize the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            store = create_store(database_url=database_url)
            store.connect()
            store.initialize_schema()
        except SQLAlchemyError as e:
            handle_fatal_error(ctx, e)
            return
        ctx.obj["store"] = store
        ctx.call_on_close(store.disconnect)


# Register all commands
process.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
