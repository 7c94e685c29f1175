"""CSV transaction reader."""

import csv
import logging
from pathlib import Path
from typing import Iterator, Optional, TextIO

from payengine.domain.entities import TransactionKind, TransactionRecord
from payengine.domain.errors import MalformedRecordError, ValidationError, missing_amount
from payengine.utils.amount_parser import parse_amount

REQUIRED_COLUMNS = ("type", "client", "tx")
AMOUNT_COLUMN = "amount"

logger = logging.getLogger(__name__)


def _field(row: dict, name: str) -> Optional[str]:
    value = row.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_id(row: dict, name: str) -> int:
    value = _field(row, name)
    if value is None:
        raise MalformedRecordError(f"Missing {name}")
    try:
        return int(value)
    except ValueError:
        raise MalformedRecordError(f"Invalid {name} '{value}'")


def parse_row(row: dict) -> TransactionRecord:
    """Parse one CSV row into a transaction record.

    Args:
        row: Mapping of lower-cased, trimmed column names to raw values

    Returns:
        TransactionRecord

    Raises:
        MalformedRecordError: If the row cannot be parsed
    """
    type_str = _field(row, "type")
    if type_str is None:
        raise MalformedRecordError("Missing type")
    try:
        kind = TransactionKind(type_str.lower())
    except ValueError:
        raise MalformedRecordError(f"Unknown transaction type '{type_str}'")

    client_id = _parse_id(row, "client")
    tx_id = _parse_id(row, "tx")

    # Dispute-type rows reference an earlier amount; anything in the column is ignored
    amount = None
    if kind.carries_amount:
        amount_str = _field(row, AMOUNT_COLUMN)
        if amount_str is None:
            raise MalformedRecordError(missing_amount(kind.value))
        try:
            amount = parse_amount(amount_str)
        except ValueError as e:
            raise MalformedRecordError(str(e)) from e

    return TransactionRecord(kind=kind, client_id=client_id, tx_id=tx_id, amount=amount)


class TransactionReader:
    """Lazily reads transaction records from a CSV file.

    Malformed rows are logged, collected in ``errors`` and skipped; only
    well-formed records are yielded.
    """

    def __init__(self, csv_file_path: str):
        """Initialize transaction reader.

        Args:
            csv_file_path: Path to CSV file with a type,client,tx,amount header
        """
        self.csv_file_path = csv_file_path
        self.errors: list[str] = []
        self.rows_read = 0

    def __iter__(self) -> Iterator[TransactionRecord]:
        return self.read()

    def read(self) -> Iterator[TransactionRecord]:
        """Yield records from the file.

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If required columns are missing
        """
        csv_path = Path(self.csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {self.csv_file_path}")

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            yield from self.read_stream(f)

    def read_stream(self, stream: TextIO) -> Iterator[TransactionRecord]:
        """Yield records from an open text stream."""
        reader = csv.DictReader(stream)

        csv_columns = reader.fieldnames
        if csv_columns is None:
            raise ValidationError("CSV file has no columns")
        reader.fieldnames = [column.strip().lower() for column in csv_columns]

        missing_columns = [col for col in REQUIRED_COLUMNS if col not in reader.fieldnames]
        if missing_columns:
            raise ValidationError(f"CSV file missing required columns: {', '.join(missing_columns)}")

        for row_num, row in enumerate(reader, start=2):  # Start at 2 (header is row 1)
            self.rows_read += 1
            try:
                record = parse_row(row)
            except MalformedRecordError as e:
                message = f"Row {row_num}: {e}"
                self.errors.append(message)
                logger.warning("Skipping malformed row. %s", message)
                continue
            yield record
