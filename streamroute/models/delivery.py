"""Batches, channel results, and per-task delivery reports."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Batch(BaseModel):
    """A count-bounded group of records sent in one channel call.

    Records already carry their trailing separator.
    """

    model_config = ConfigDict(frozen=True)

    destination: str
    records: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records


class RecordResult(BaseModel):
    """Outcome of one record within a channel call."""

    model_config = ConfigDict(frozen=True)

    error_code: str = ""
    error_message: str = ""
    record_id: str = ""

    @property
    def failed(self) -> bool:
        """A record counts as failed if it has any error or no assigned id."""
        return bool(self.error_code or self.error_message or not self.record_id)


class PutBatchResult(BaseModel):
    """Response of a successful ``put_batch`` call.

    ``results`` is positional: entry *i* describes record *i* of the batch.
    """

    model_config = ConfigDict(frozen=True)

    failed_count: int = 0
    results: tuple[RecordResult, ...] = ()


class DeliveryStatus(str, Enum):
    """Terminal state of one delivery task."""

    DELIVERED = "delivered"
    SKIPPED_EMPTY = "skipped_empty"
    FATAL = "fatal"


class DeliveryReport(BaseModel):
    """What happened to one original batch, across all its retries."""

    model_config = ConfigDict(frozen=True)

    destination: str
    original_destination: str
    record_count: int
    attempts: int
    status: DeliveryStatus
    error: str | None = None


class DispatchReport(BaseModel):
    """Aggregate of every delivery task in one dispatch."""

    model_config = ConfigDict(frozen=True)

    reports: list[DeliveryReport] = Field(default_factory=list)

    @property
    def fatal(self) -> list[DeliveryReport]:
        return [r for r in self.reports if r.status == DeliveryStatus.FATAL]

    @property
    def delivered(self) -> list[DeliveryReport]:
        return [r for r in self.reports if r.status == DeliveryStatus.DELIVERED]

    @property
    def ok(self) -> bool:
        return not self.fatal
