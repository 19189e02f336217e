"""Splits one destination's records into bounded batches."""

from __future__ import annotations

from collections.abc import Iterable

from streamroute.models.delivery import Batch

# PutRecordBatch accepts at most 500 records per request (4 MB total).
MAX_RECORDS_PER_BATCH = 500

# The delivery channel stores payloads back to back, so each record carries
# its own delimiter.
RECORD_SEPARATOR = "\n"


def build_batches(
    destination: str,
    records: Iterable[str],
    max_per_batch: int = MAX_RECORDS_PER_BATCH,
    separator: str = RECORD_SEPARATOR,
) -> list[Batch]:
    """Partition *records* into batches of at most *max_per_batch*.

    Empty-string records are dropped.  Order is preserved across batch
    boundaries.  An input with no deliverable records still yields a
    single empty batch.

    Raises
    ------
    ValueError
        If *max_per_batch* is less than 1.
    """
    if max_per_batch < 1:
        raise ValueError(f"max_per_batch must be >= 1, got {max_per_batch}")

    batches: list[Batch] = []
    current: list[str] = []

    for record in records:
        if record == "":
            continue
        if len(current) >= max_per_batch:
            batches.append(Batch(destination=destination, records=tuple(current)))
            current = []
        current.append(record + separator)

    batches.append(Batch(destination=destination, records=tuple(current)))
    return batches
