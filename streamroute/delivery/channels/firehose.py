"""Firehose channel — delivers batches with ``PutRecordBatch``.

Each record is sent as-is (see ``encode_record``); the batch builder has already
appended the record separator, since Firehose concatenates payloads
without a delimiter.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from streamroute.delivery.channels import ChannelError, DestinationNotFoundError
from streamroute.models.delivery import PutBatchResult, RecordResult
from streamroute.stream.decoder import encode_record

logger = logging.getLogger(__name__)

NOT_FOUND_CODE = "ResourceNotFoundException"


class FirehoseChannel:
    """Sends batches to Kinesis Data Firehose delivery streams.

    Retries are owned by the executor, so the boto3 client is built with
    its own retrying turned down to a single attempt.

    Parameters
    ----------
    region:
        AWS region of the delivery streams.  ``None`` uses the boto3 default.
    client:
        A pre-built ``firehose`` client (tests pass a stubbed one).
    """

    def __init__(self, region: str | None = None, client: Any | None = None) -> None:
        self._region = region or None
        if client is None:
            client = boto3.client(
                "firehose",
                region_name=self._region,
                config=Config(retries={"max_attempts": 1, "mode": "standard"}),
            )
        self._client = client

    @property
    def channel_name(self) -> str:
        return "firehose"

    def put_batch(self, destination: str, records: Sequence[str]) -> PutBatchResult:
        entries = [{"Data": encode_record(record)} for record in records]
        try:
            resp = self._client.put_record_batch(
                DeliveryStreamName=destination, Records=entries
            )
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code == NOT_FOUND_CODE:
                raise DestinationNotFoundError(
                    f"{NOT_FOUND_CODE}: delivery stream {destination!r} not found"
                ) from exc
            raise ChannelError(f"PutRecordBatch to {destination!r} failed: {exc}") from exc
        except BotoCoreError as exc:
            raise ChannelError(f"PutRecordBatch to {destination!r} failed: {exc}") from exc

        results = tuple(
            RecordResult(
                error_code=item.get("ErrorCode") or "",
                error_message=item.get("ErrorMessage") or "",
                record_id=item.get("RecordId") or "",
            )
            for item in resp.get("RequestResponses", [])
        )
        return PutBatchResult(
            failed_count=resp.get("FailedPutCount", 0), results=results
        )
