"""Turns a Kinesis-style event into text records.

Each stream entry carries base64 data.  A single entry may pack several
logical records (KPL aggregation); ``kpl_deaggregator`` unpacks those and
passes plain entries through unchanged.

Payloads are decoded as UTF-8 with ``surrogateescape``, so bytes that are
not valid UTF-8 survive as lone surrogates and are restored byte-for-byte
when a channel encodes the record the same way.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Callable, Mapping
from typing import Any

from aws_kinesis_agg.deaggregator import deaggregate_records

logger = logging.getLogger(__name__)

# raw entry bytes -> logical record payloads
Deaggregator = Callable[[bytes], list[bytes]]

PAYLOAD_ENCODING = "utf-8"
PAYLOAD_ERRORS = "surrogateescape"


def passthrough_deaggregator(data: bytes) -> list[bytes]:
    """Treat every stream entry as exactly one logical record."""
    return [data]


def kpl_deaggregator(data: bytes) -> list[bytes]:
    """Expand a KPL-aggregated entry into its user records.

    Entries without the KPL magic header (or with a bad checksum) come back
    as a single record.
    """
    entry = {
        "kinesis": {
            "kinesisSchemaVersion": "1.0",
            "partitionKey": "",
            "sequenceNumber": "0",
            "approximateArrivalTimestamp": 0.0,
            "data": base64.b64encode(data).decode("ascii"),
        }
    }
    return [
        base64.b64decode(record["kinesis"]["data"])
        for record in deaggregate_records([entry])
    ]


def decode_payload(payload: bytes) -> str:
    return payload.decode(PAYLOAD_ENCODING, errors=PAYLOAD_ERRORS)


def encode_record(record: str) -> bytes:
    """Inverse of ``decode_payload``."""
    return record.encode(PAYLOAD_ENCODING, errors=PAYLOAD_ERRORS)


def decode_stream_event(
    event: Mapping[str, Any],
    deaggregator: Deaggregator | None = None,
) -> list[str]:
    """Extract text records from *event*, in stream order.

    Entries whose data is missing or not base64 are logged and skipped.
    If the deaggregator fails, the entry is kept as one record.
    """
    deaggregate = deaggregator or kpl_deaggregator
    texts: list[str] = []

    for entry in event.get("Records", []):
        entry_id = entry.get("eventID", "?")
        try:
            data = base64.b64decode(entry["kinesis"]["data"], validate=True)
        except (KeyError, TypeError, ValueError, binascii.Error) as exc:
            logger.warning(
                "Failed to decode stream entry %s (event %s): %s",
                entry_id,
                entry.get("eventName", ""),
                exc,
            )
            continue

        try:
            payloads = deaggregate(data)
        except Exception as exc:
            logger.warning(
                "Failed to deaggregate stream entry %s, keeping it as one record: %s",
                entry_id,
                exc,
            )
            payloads = [data]

        texts.extend(decode_payload(payload) for payload in payloads)

    return texts
