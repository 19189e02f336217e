"""DeliveryExecutor — concurrent batch delivery with bounded retry.

Each batch is delivered by its own worker thread.  A batch is retried at a
fixed interval until it succeeds or its retry budget runs out:

- a failed call is retried unchanged, or against the default destination
  when the destination does not exist;
- a partially failed call is retried with only the rejected records;
- running out of retries is fatal for that batch.

Fatal batches do not stop their siblings.  Once every batch has finished,
``dispatch`` raises ``RetryExhaustedError`` if any of them was fatal.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor

from streamroute.delivery.batcher import MAX_RECORDS_PER_BATCH, build_batches
from streamroute.delivery.channels import (
    ChannelError,
    DeliveryChannel,
    DestinationNotFoundError,
)
from streamroute.delivery.retry import RetryPolicy, decide_retry, indicates_not_found
from streamroute.models.delivery import (
    Batch,
    DeliveryReport,
    DeliveryStatus,
    DispatchReport,
    RecordResult,
)

logger = logging.getLogger(__name__)


class RetryExhaustedError(RuntimeError):
    """Raised when one or more batches ran out of delivery retries."""

    def __init__(self, report: DispatchReport) -> None:
        self.report = report
        fatal = report.fatal
        super().__init__(
            f"{len(fatal)}/{len(report.reports)} batches exhausted their retries: "
            + "; ".join(
                f"{r.destination} after {r.attempts} attempts" for r in fatal
            )
        )


class DeliveryExecutor:
    """Builds batches per destination and delivers them concurrently.

    Parameters
    ----------
    channel:
        Shared delivery channel.  Called from several threads at once.
    default_destination:
        Fallback used when a destination turns out not to exist.
    policy:
        Retry ceiling and fixed pause between attempts.
    max_per_batch:
        Record count limit per channel call.
    max_workers:
        Optional cap on concurrent deliveries.  ``None`` runs one thread
        per batch.
    sleep:
        Pause function, replaced in tests.
    log:
        Logger to report through.  Defaults to this module's logger.
    """

    def __init__(
        self,
        channel: DeliveryChannel,
        default_destination: str,
        policy: RetryPolicy | None = None,
        max_per_batch: int = MAX_RECORDS_PER_BATCH,
        max_workers: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
        log: logging.Logger | None = None,
    ) -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._channel = channel
        self._default_destination = default_destination
        self._policy = policy or RetryPolicy()
        self._max_per_batch = max_per_batch
        self._max_workers = max_workers
        self._sleep = sleep
        self._log = log or logger

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def build_worklist(self, destination_map: Mapping[str, Sequence[str]]) -> list[Batch]:
        """Flatten every destination's batches into one list."""
        worklist: list[Batch] = []
        for destination, records in destination_map.items():
            worklist.extend(build_batches(destination, records, self._max_per_batch))
        return worklist

    def dispatch(self, destination_map: Mapping[str, Sequence[str]]) -> DispatchReport:
        """Deliver every destination's records and wait for all deliveries.

        Returns a ``DispatchReport`` with one entry per batch, in worklist
        order.

        Raises
        ------
        RetryExhaustedError
            If any batch ran out of retries.  Raised only after every other
            batch has finished.
        """
        worklist = self.build_worklist(destination_map)
        if not worklist:
            return DispatchReport()

        workers = len(worklist)
        if self._max_workers is not None:
            workers = min(workers, self._max_workers)

        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="streamroute-deliver"
        ) as pool:
            futures = [pool.submit(self.deliver, batch) for batch in worklist]

        report = DispatchReport(reports=[future.result() for future in futures])
        if report.fatal:
            raise RetryExhaustedError(report)
        return report

    # ------------------------------------------------------------------
    # Per-batch delivery
    # ------------------------------------------------------------------

    def deliver(self, batch: Batch) -> DeliveryReport:
        """Deliver one batch, retrying until success or retry exhaustion.

        The loop asks ``decide_retry`` rather than wrapping the call in
        ``tenacity.Retrying`` because the batch itself changes between
        attempts (failed subset, rerouted destination).
        """
        original_destination = batch.destination
        original_count = len(batch)

        if batch.is_empty:
            self._log.debug("Skipping empty batch for %s", original_destination)
            return DeliveryReport(
                destination=original_destination,
                original_destination=original_destination,
                record_count=0,
                attempts=0,
                status=DeliveryStatus.SKIPPED_EMPTY,
            )

        current = batch
        retry_count = 0
        while True:
            try:
                result = self._channel.put_batch(current.destination, current.records)
            except ChannelError as exc:
                self._log.warning(
                    "put_batch to %s failed (attempt %d): %s",
                    current.destination,
                    retry_count + 1,
                    exc,
                )
                if isinstance(exc, DestinationNotFoundError) or indicates_not_found(str(exc)):
                    current = self._reroute(current)
                error = str(exc)
            else:
                if result.failed_count == 0:
                    self._log.debug(
                        "put_batch to %s succeeded (attempt %d)",
                        current.destination,
                        retry_count + 1,
                    )
                    return self._report(
                        current, original_destination, original_count,
                        retry_count + 1, DeliveryStatus.DELIVERED,
                    )

                self._log.warning(
                    "put_batch to %s reported %d failed records (attempt %d)",
                    current.destination,
                    result.failed_count,
                    retry_count + 1,
                )
                retry_batch = self._failed_subset(current, result.results)
                if retry_batch.is_empty:
                    self._log.warning(
                        "put_batch to %s reported failures but no record was marked failed",
                        current.destination,
                    )
                    return self._report(
                        current, original_destination, original_count,
                        retry_count + 1, DeliveryStatus.DELIVERED,
                    )
                current = retry_batch
                error = f"{result.failed_count} records failed"

            decision = decide_retry(retry_count, self._policy)
            if not decision.retry:
                self._log.error(
                    "Delivery to %s gave up after %d attempts: %s",
                    current.destination,
                    retry_count + 1,
                    error,
                )
                return self._report(
                    current, original_destination, original_count,
                    retry_count + 1, DeliveryStatus.FATAL, error,
                )

            self._sleep(decision.delay)
            retry_count = decision.next_count

    def _failed_subset(
        self, batch: Batch, results: Sequence[RecordResult]
    ) -> Batch:
        """Keep only the records whose result is a failure.

        Records with no matching result entry count as failed.
        """
        destination = batch.destination
        rerouted = False
        retry_records: list[str] = []
        for index, record in enumerate(batch.records):
            outcome = results[index] if index < len(results) else RecordResult()
            if not outcome.failed:
                continue
            self._log.warning(
                "Record rejected by %s: code=%s message=%s record=%r",
                batch.destination,
                outcome.error_code,
                outcome.error_message,
                record,
            )
            # One batch has one destination, so a single not-found moves them all.
            if indicates_not_found(outcome.error_code + outcome.error_message):
                rerouted = True
            retry_records.append(record)

        retry_batch = Batch(destination=destination, records=tuple(retry_records))
        if rerouted:
            retry_batch = self._reroute(retry_batch)
        return retry_batch

    def _reroute(self, batch: Batch) -> Batch:
        if batch.destination != self._default_destination:
            self._log.warning(
                "Destination %s not found, rerouting %d records to %s",
                batch.destination,
                len(batch),
                self._default_destination,
            )
        return Batch(destination=self._default_destination, records=batch.records)

    @staticmethod
    def _report(
        batch: Batch,
        original_destination: str,
        record_count: int,
        attempts: int,
        status: DeliveryStatus,
        error: str | None = None,
    ) -> DeliveryReport:
        return DeliveryReport(
            destination=batch.destination,
            original_destination=original_destination,
            record_count=record_count,
            attempts=attempts,
            status=status,
            error=error,
        )
