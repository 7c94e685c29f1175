"""Account report rendering."""

import csv
from typing import Iterable, TextIO

from payengine.domain.entities import ReportRow

REPORT_HEADER = ("client", "available", "held", "total", "locked")


def report_row_to_csv(row: ReportRow) -> list[str]:
    """Render a report row as CSV fields."""
    client_id, available, held, total, locked = row.as_tuple()
    return [str(client_id), available, held, total, "true" if locked else "false"]


def write_report(rows: Iterable[ReportRow], stream: TextIO) -> int:
    """Write the account report as CSV.

    Args:
        rows: Report rows, already in output order
        stream: Text stream to write to

    Returns:
        Number of account rows written
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    count = 0
    for row in rows:
        writer.writerow(report_row_to_csv(row))
        count += 1
    return count
