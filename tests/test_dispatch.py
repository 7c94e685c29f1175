"""Tests for partitioned dispatch."""

import random
from decimal import Decimal

import pytest

from payengine.database.memory import InMemoryStore
from payengine.domain.dispatch import PartitionedDispatcher
from payengine.domain.entities import TransactionKind, TransactionRecord
from payengine.domain.errors import AmountOverflowError
from payengine.domain.ledger import LedgerEngine
from payengine.utils.amount_parser import MAX_AMOUNT


def build_stream(seed=7, clients=12, length=600):
    """Random stream with globally unique deposit/withdrawal IDs.

    Disputes only reference the same client's earlier transactions, so the
    outcome depends on per-client order alone.
    """
    rng = random.Random(seed)
    stream = []
    owned = {client_id: [] for client_id in range(1, clients + 1)}
    next_tx = 1
    for _ in range(length):
        client_id = rng.randint(1, clients)
        roll = rng.random()
        if roll < 0.5 or not owned[client_id]:
            kind = TransactionKind.DEPOSIT if roll < 0.35 else TransactionKind.WITHDRAWAL
            amount = Decimal(rng.randint(1, 100000)).scaleb(-4)
            stream.append(TransactionRecord(kind, client_id, next_tx, amount))
            owned[client_id].append(next_tx)
            next_tx += 1
        else:
            kind = rng.choice(
                [TransactionKind.DISPUTE, TransactionKind.RESOLVE, TransactionKind.CHARGEBACK]
            )
            stream.append(TransactionRecord(kind, client_id, rng.choice(owned[client_id])))
    return stream


def sequential_report(stream):
    engine = LedgerEngine(InMemoryStore())
    summary = engine.process(stream)
    return engine.finalize(), summary


class TestPartitionedDispatcher:
    """Tests for PartitionedDispatcher."""

    def test_single_worker_matches_engine(self, engine):
        stream = build_stream()
        expected_rows, expected_summary = sequential_report(stream)

        summary = PartitionedDispatcher(engine, workers=1).run(stream)

        assert engine.finalize() == expected_rows
        assert summary.applied == expected_summary.applied
        assert summary.rejected == expected_summary.rejected

    @pytest.mark.parametrize("workers", [2, 3, 8])
    def test_many_workers_match_sequential(self, engine, workers):
        stream = build_stream()
        expected_rows, expected_summary = sequential_report(stream)

        summary = PartitionedDispatcher(engine, workers=workers, queue_size=4).run(stream)

        assert engine.finalize() == expected_rows
        assert summary.applied == expected_summary.applied
        assert summary.rejected == expected_summary.rejected
        assert summary.total == len(stream)

    def test_dispute_lifecycle_across_workers(self, engine):
        stream = [
            TransactionRecord(TransactionKind.DEPOSIT, 1, 1, Decimal("10")),
            TransactionRecord(TransactionKind.DEPOSIT, 2, 2, Decimal("5")),
            TransactionRecord(TransactionKind.DISPUTE, 1, 1),
            TransactionRecord(TransactionKind.DISPUTE, 2, 2),
            TransactionRecord(TransactionKind.CHARGEBACK, 1, 1),
            TransactionRecord(TransactionKind.RESOLVE, 2, 2),
            TransactionRecord(TransactionKind.DEPOSIT, 1, 3, Decimal("1")),
        ]

        summary = PartitionedDispatcher(engine, workers=2).run(stream)

        assert [row.as_tuple() for row in engine.finalize()] == [
            (1, "0.0000", "0.0000", "0.0000", True),
            (2, "5.0000", "0.0000", "5.0000", False),
        ]
        assert summary.rejected == {"account_locked": 1}

    def test_partition_by_client(self, engine):
        dispatcher = PartitionedDispatcher(engine, workers=4)

        assert dispatcher.partition(TransactionRecord(TransactionKind.DISPUTE, 9, 1)) == 1
        assert dispatcher.partition(TransactionRecord(TransactionKind.DISPUTE, 8, 1)) == 0

    def test_fatal_error_propagates(self, engine):
        stream = [
            TransactionRecord(TransactionKind.DEPOSIT, 1, 1, MAX_AMOUNT),
            TransactionRecord(TransactionKind.DEPOSIT, 1, 2, Decimal("1")),
        ]
        stream += [
            TransactionRecord(TransactionKind.DEPOSIT, client_id % 5 + 2, tx_id, Decimal("1"))
            for client_id, tx_id in enumerate(range(3, 500))
        ]

        with pytest.raises(AmountOverflowError):
            PartitionedDispatcher(engine, workers=3, queue_size=2).run(stream)

        assert engine.store.get_account(1).available == MAX_AMOUNT

    def test_source_error_propagates(self, engine):
        def records():
            yield TransactionRecord(TransactionKind.DEPOSIT, 1, 1, Decimal("1"))
            raise RuntimeError("source failed")

        with pytest.raises(RuntimeError, match="source failed"):
            PartitionedDispatcher(engine, workers=2).run(records())

    @pytest.mark.parametrize("workers,queue_size", [(0, 1), (1, 0)])
    def test_invalid_settings(self, engine, workers, queue_size):
        with pytest.raises(ValueError):
            PartitionedDispatcher(engine, workers=workers, queue_size=queue_size)
