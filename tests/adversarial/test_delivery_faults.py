"""Adversarial tests — delivery resilience under hostile channels and input.

These tests verify that:
1. Malformed records never break routing
2. A channel rejecting records intermittently still gets every record delivered once
3. A flapping channel never resends records it already accepted
4. Retry exhaustion in one destination leaves the others untouched
5. Many concurrent batches against a shared channel all complete
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

import pytest

from streamroute.delivery.channels import ChannelError
from streamroute.delivery.executor import DeliveryExecutor, RetryExhaustedError
from streamroute.models.delivery import PutBatchResult, RecordResult
from streamroute.models.routing import RoutingConfig
from streamroute.routing.router import Router

# ---------------------------------------------------------------------------
# Test channels
# ---------------------------------------------------------------------------


class FlakyChannel:
    """Rejects every other record the first time it is offered; accepts retries."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._offered: set[str] = set()
        self.accepted: list[str] = []

    @property
    def channel_name(self) -> str:
        return "flaky"

    def put_batch(self, destination: str, records: Sequence[str]) -> PutBatchResult:
        results = []
        failed = 0
        with self._lock:
            for position, record in enumerate(records):
                first_offer = record not in self._offered
                self._offered.add(record)
                if first_offer and position % 2 == 0:
                    results.append(RecordResult(error_code="InternalFailure", error_message="flaky"))
                    failed += 1
                else:
                    results.append(RecordResult(record_id=record))
                    self.accepted.append(record)
        return PutBatchResult(failed_count=failed, results=tuple(results))


class ExplodingChannel:
    """Fails every call for the named destinations with the given exception."""

    def __init__(self, broken: set[str], exc_type: type[Exception] = ChannelError) -> None:
        self._broken = broken
        self._exc_type = exc_type
        self._lock = threading.Lock()
        self.accepted: dict[str, list[str]] = {}

    @property
    def channel_name(self) -> str:
        return "exploding"

    def put_batch(self, destination: str, records: Sequence[str]) -> PutBatchResult:
        if destination in self._broken:
            raise self._exc_type(f"{destination} exploded!")
        with self._lock:
            self.accepted.setdefault(destination, []).extend(records)
        return PutBatchResult(
            results=tuple(RecordResult(record_id=str(i)) for i in range(len(records)))
        )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestHostileInput:
    @pytest.mark.parametrize(
        "record",
        ["", "\t", "app", "app:", ":app", "app::x", "\tapp:\t", "app:a\tapp:b", "x" * 10_000],
    )
    def test_router_accepts_anything(self, record: str):
        router = Router(RoutingConfig(routing_label="app", default_destination="d"))
        result = router.route([record])
        assert sum(len(v) for v in result.values()) == 1


class TestFlakyChannel:
    def test_every_record_accepted_exactly_once(self):
        channel = FlakyChannel()
        executor = DeliveryExecutor(
            channel, "d", max_per_batch=10, sleep=lambda _: None,
        )
        records = [f"rec-{i}" for i in range(100)]

        executor.dispatch({"d": records})

        assert sorted(channel.accepted) == sorted(f"{r}\n" for r in records)


class TestIsolation:
    @pytest.mark.parametrize("exc_type", [ChannelError, ConnectionError, TimeoutError])
    def test_broken_destination_does_not_affect_others(self, exc_type: type[Exception]):
        channel = ExplodingChannel({"bad"}, exc_type=exc_type)
        executor = DeliveryExecutor(channel, "also-bad", sleep=lambda _: None)

        if issubclass(exc_type, ChannelError):
            with pytest.raises(RetryExhaustedError):
                executor.dispatch({"bad": ["x"], "good": ["y"]})
        else:
            # non-channel errors are bugs in the channel, not delivery failures
            with pytest.raises(exc_type):
                executor.dispatch({"bad": ["x"], "good": ["y"]})

        assert channel.accepted["good"] == ["y\n"]

    def test_many_concurrent_batches(self):
        channel = ExplodingChannel(set())
        executor = DeliveryExecutor(channel, "d", max_per_batch=1, sleep=lambda _: None)
        destination_map = {f"dest-{i}": [f"r{j}" for j in range(5)] for i in range(20)}

        report = executor.dispatch(destination_map)

        assert len(report.delivered) == 100
        assert all(len(v) == 5 for v in channel.accepted.values())
