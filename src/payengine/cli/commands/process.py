"""Transaction processing command."""

import io

import click
from sqlalchemy.exc import SQLAlchemyError

from payengine.cli.error_handling import handle_fatal_error
from payengine.domain.csv_import import TransactionReader
from payengine.domain.dispatch import DEFAULT_QUEUE_SIZE, PartitionedDispatcher
from payengine.domain.errors import AmountOverflowError, DomainError
from payengine.domain.ledger import EngineConfig, LedgerEngine
from payengine.domain.report import write_report


@click.command("process")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    envvar="PAYENGINE_WORKERS",
    help="Worker threads; records are partitioned across them by client",
)
@click.option(
    "--queue-size",
    type=click.IntRange(min=1),
    default=DEFAULT_QUEUE_SIZE,
    show_default=True,
    envvar="PAYENGINE_QUEUE_SIZE",
    help="Capacity of each worker's queue",
)
@click.option(
    "--report-rejections/--quiet-rejections",
    default=True,
    help="Log rejected records as warnings (default) or only at debug level",
)
@click.option("--summary", "show_summary", is_flag=True, help="Print processing statistics to stderr")
@click.pass_context
def process_transactions(
    ctx, csv_file: str, workers: int, queue_size: int, report_rejections: bool, show_summary: bool
):
    """Apply transactions from CSV_FILE and print the account report.

    The report goes to stdout as CSV with one row per client, ordered by
    client ID. Rejected and malformed records are reported on stderr.
    """
    store = ctx.obj["store"]
    engine = LedgerEngine(store, EngineConfig(report_rejections=report_rejections))
    reader = TransactionReader(csv_file)
    dispatcher = PartitionedDispatcher(engine, workers=workers, queue_size=queue_size)

    try:
        summary = dispatcher.run(reader)
        rows = engine.finalize()
    except (DomainError, AmountOverflowError, SQLAlchemyError) as e:
        handle_fatal_error(ctx, e)
        return

    output = io.StringIO()
    write_report(rows, output)
    click.echo(output.getvalue(), nl=False)

    if show_summary:
        click.echo(f"Applied: {summary.applied} records", err=True)
        click.echo(f"Rejected: {summary.total_rejected} records", err=True)
        for kind, count in sorted(summary.rejected.items()):
            click.echo(f"  {kind}: {count}", err=True)
        click.echo(f"Malformed: {len(reader.errors)} rows", err=True)


def register_commands(cli):
    """Register process command with main CLI."""
    cli.add_command(process_transactions)
