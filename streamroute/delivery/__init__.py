"""streamroute delivery — bounded batches, concurrent dispatch, bounded retry.

Records routed to a destination are split into batches no larger than the
channel's per-call limit, then delivered concurrently through a shared
``DeliveryChannel``.  Partial and total failures are retried at a fixed
interval; a missing destination is swapped for the default destination.
"""

from streamroute.delivery.batcher import MAX_RECORDS_PER_BATCH, build_batches
from streamroute.delivery.executor import DeliveryExecutor, RetryExhaustedError
from streamroute.delivery.retry import RetryDecision, RetryPolicy, decide_retry

__all__ = [
    "MAX_RECORDS_PER_BATCH",
    "DeliveryExecutor",
    "RetryDecision",
    "RetryExhaustedError",
    "RetryPolicy",
    "build_batches",
    "decide_retry",
]
