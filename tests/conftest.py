"""Shared test fixtures for streamroute."""

from __future__ import annotations

import base64
import threading
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from streamroute.models.delivery import PutBatchResult, RecordResult
from streamroute.models.routing import RoutingConfig, Substitution

# An outcome is a PutBatchResult, an exception to raise, or a callable
# building a PutBatchResult from the records of the call.
Outcome = Any


def success_for(records: Sequence[str]) -> PutBatchResult:
    return PutBatchResult(
        failed_count=0,
        results=tuple(RecordResult(record_id=f"id-{i}") for i in range(len(records))),
    )


def partial_failure(
    failed_indices: set[int], error_code: str = "ServiceUnavailableException",
    error_message: str = "Slow down.",
) -> Callable[[Sequence[str]], PutBatchResult]:
    """Outcome factory: fail the records at *failed_indices*, accept the rest."""

    def _build(records: Sequence[str]) -> PutBatchResult:
        results = []
        for i in range(len(records)):
            if i in failed_indices:
                results.append(RecordResult(error_code=error_code, error_message=error_message))
            else:
                results.append(RecordResult(record_id=f"id-{i}"))
        return PutBatchResult(failed_count=len(failed_indices), results=tuple(results))

    return _build


class ScriptedChannel:
    """A thread-safe fake channel replaying scripted outcomes.

    Outcomes are consumed per destination in call order; the ``"*"`` key
    applies to any destination without its own script.  Once a script is
    exhausted every further call succeeds.
    """

    def __init__(self, script: dict[str, list[Outcome]] | None = None) -> None:
        self._script = {k: list(v) for k, v in (script or {}).items()}
        self._lock = threading.Lock()
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    @property
    def channel_name(self) -> str:
        return "scripted"

    def put_batch(self, destination: str, records: Sequence[str]) -> PutBatchResult:
        with self._lock:
            self.calls.append((destination, tuple(records)))
            key = destination if destination in self._script else "*"
            queue = self._script.get(key, [])
            outcome = queue.pop(0) if queue else None

        if outcome is None:
            return success_for(records)
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return outcome(records)
        return outcome

    def calls_to(self, destination: str) -> list[tuple[str, ...]]:
        return [records for dest, records in self.calls if dest == destination]


@pytest.fixture
def sleeps() -> list[float]:
    """Collects pause durations; pass ``sleeps.append`` as the sleep function."""
    return []


@pytest.fixture
def routing_config() -> RoutingConfig:
    """Label-based routing with every rewrite rule in play."""
    return RoutingConfig(
        routing_label="app",
        default_destination="fh-default",
        strip_prefix="app-",
        add_prefix="fh-",
        substitutions=(Substitution(match="-prod", replacement=""),),
    )


@pytest.fixture
def make_kinesis_event() -> Callable[..., dict[str, Any]]:
    """Factory fixture: build a Kinesis-style event from text records."""

    def _factory(*texts: str, raw: Sequence[str] = ()) -> dict[str, Any]:
        records = [
            {
                "eventID": f"shardId-000:{i}",
                "eventName": "aws:kinesis:record",
                "kinesis": {"data": base64.b64encode(text.encode("utf-8")).decode("ascii")},
            }
            for i, text in enumerate(texts)
        ]
        records.extend(
            {"eventID": f"raw:{i}", "eventName": "aws:kinesis:record", "kinesis": {"data": data}}
            for i, data in enumerate(raw)
        )
        return {"Records": records}

    return _factory
