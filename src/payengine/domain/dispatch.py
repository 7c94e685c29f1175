"""Partitioned record dispatch.

Records are routed to one bounded queue per worker by ``client_id``, so
every client is served by a single sequential worker and its records are
applied in arrival order. Different clients proceed in parallel, and the
producer only blocks while the target queue is full.
"""

import logging
import threading
from queue import Queue
from typing import Iterable

from payengine.domain.entities import TransactionRecord
from payengine.domain.ledger import LedgerEngine, ProcessingSummary

DEFAULT_QUEUE_SIZE = 1024

logger = logging.getLogger(__name__)

_STOP = object()


class PartitionedDispatcher:
    """Feeds records to a ledger engine from one or more worker threads."""

    def __init__(self, engine: LedgerEngine, workers: int = 1, queue_size: int = DEFAULT_QUEUE_SIZE):
        """Initialize dispatcher.

        Args:
            engine: Ledger engine to apply records with
            workers: Number of partitions; 1 applies records in the calling thread
            queue_size: Capacity of each partition queue

        Raises:
            ValueError: If workers or queue_size is less than 1
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        if queue_size < 1:
            raise ValueError(f"queue_size must be at least 1, got {queue_size}")
        self.engine = engine
        self.workers = workers
        self.queue_size = queue_size

    def partition(self, record: TransactionRecord) -> int:
        """Return the worker index that owns the record's client."""
        return record.client_id % self.workers

    def run(self, records: Iterable[TransactionRecord]) -> ProcessingSummary:
        """Apply every record and wait for all workers to finish.

        Returns:
            Processing summary

        Raises:
            AmountOverflowError: Or any other fatal error raised by a worker,
                after the remaining workers have drained their queues
        """
        summary = ProcessingSummary()
        if self.workers == 1:
            return self.engine.process(records, summary)

        queues: list[Queue] = [Queue(maxsize=self.queue_size) for _ in range(self.workers)]
        failed = threading.Event()
        failures: list[BaseException] = []
        threads = [
            threading.Thread(
                target=self._consume,
                args=(queue, summary, failed, failures),
                name=f"payengine-worker-{index}",
                daemon=True,
            )
            for index, queue in enumerate(queues)
        ]
        for thread in threads:
            thread.start()

        logger.info("Dispatching records to %d workers", self.workers)
        try:
            for record in records:
                if failed.is_set():
                    break
                queues[self.partition(record)].put(record)
        finally:
            for queue in queues:
                queue.put(_STOP)
            for thread in threads:
                thread.join()

        if failures:
            raise failures[0]

        logger.info("Applied %d records, rejected %d", summary.applied, summary.total_rejected)
        return summary

    def _consume(
        self,
        queue: Queue,
        summary: ProcessingSummary,
        failed: threading.Event,
        failures: list[BaseException],
    ) -> None:
        """Worker loop: apply records until the stop marker arrives."""
        while True:
            record = queue.get()
            if record is _STOP:
                return
            if failed.is_set():
                # Keep draining so the producer never blocks on a full queue
                continue
            try:
                self.engine.process_one(record, summary)
            except Exception as exc:
                logger.error("Fatal error in %s: %s", threading.current_thread().name, exc)
                failures.append(exc)
                failed.set()
