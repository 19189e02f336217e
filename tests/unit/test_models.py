"""Unit tests for the routing and delivery models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from streamroute.models import (
    Batch,
    DeliveryReport,
    DeliveryStatus,
    DispatchReport,
    RecordResult,
    RoutingConfig,
    Substitution,
)


class TestRoutingConfig:
    def test_frozen(self):
        cfg = RoutingConfig(routing_label="app")
        with pytest.raises(ValidationError):
            cfg.routing_label = "other"

    def test_is_fixed(self):
        assert RoutingConfig(fixed_destination="x").is_fixed
        assert not RoutingConfig().is_fixed

    def test_substitutions_from_lists(self):
        cfg = RoutingConfig(substitutions=[{"match": "a", "replacement": "b"}])
        assert cfg.substitutions == (Substitution(match="a", replacement="b"),)


class TestRecordResult:
    @pytest.mark.parametrize(
        "result,failed",
        [
            (RecordResult(record_id="id"), False),
            (RecordResult(record_id="id", error_code="E"), True),
            (RecordResult(record_id="id", error_message="m"), True),
            (RecordResult(), True),
        ],
    )
    def test_failed(self, result: RecordResult, failed: bool):
        assert result.failed is failed


class TestBatch:
    def test_len_and_empty(self):
        assert len(Batch(destination="d", records=("a\n", "b\n"))) == 2
        assert Batch(destination="d").is_empty


class TestDispatchReport:
    def _report(self, status: DeliveryStatus) -> DeliveryReport:
        return DeliveryReport(
            destination="d", original_destination="d", record_count=1, attempts=1, status=status
        )

    def test_partitions(self):
        report = DispatchReport(reports=[
            self._report(DeliveryStatus.DELIVERED),
            self._report(DeliveryStatus.FATAL),
            self._report(DeliveryStatus.SKIPPED_EMPTY),
        ])
        assert len(report.delivered) == 1
        assert len(report.fatal) == 1
        assert not report.ok

    def test_empty_is_ok(self):
        assert DispatchReport().ok
