"""Local file channel. Appends batches to per-destination files.

Layout: {base_path}/{destination}.log

Records already end with their separator, so the file content matches
what a consumer of the real delivery stream would read back.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Iterable, Sequence
from pathlib import Path

from streamroute.delivery.batcher import RECORD_SEPARATOR
from streamroute.delivery.channels import ChannelError, DestinationNotFoundError
from streamroute.models.delivery import PutBatchResult, RecordResult
from streamroute.stream.decoder import decode_payload, encode_record

logger = logging.getLogger(__name__)


class LocalFileChannel:
    """Writes delivered records to local files.

    Parameters
    ----------
    base_path:
        Root directory for destination files.  Defaults to ``.streamroute/out``.
    known_destinations:
        If given, any other destination raises ``DestinationNotFoundError``,
        mimicking a missing delivery stream.
    """

    def __init__(
        self,
        base_path: Path | str | None = None,
        known_destinations: Iterable[str] | None = None,
    ) -> None:
        self._base = Path(base_path) if base_path else Path(".streamroute/out")
        self._base.mkdir(parents=True, exist_ok=True)
        self._known = set(known_destinations) if known_destinations is not None else None
        self._lock = threading.Lock()

    @property
    def channel_name(self) -> str:
        return "local_file"

    def put_batch(self, destination: str, records: Sequence[str]) -> PutBatchResult:
        """Append *records* to ``{base_path}/{destination}.log``."""
        if self._known is not None and destination not in self._known:
            raise DestinationNotFoundError(
                f"ResourceNotFound: destination {destination!r} is not configured"
            )
        if not destination or "/" in destination or destination in (".", ".."):
            raise ChannelError(f"Invalid destination name for file channel: {destination!r}")

        target = self._base / f"{destination}.log"
        with self._lock, target.open("ab") as fh:
            fh.write(b"".join(encode_record(record) for record in records))

        logger.debug(
            "LocalFileChannel: wrote %d records to %s", len(records), target
        )
        return PutBatchResult(
            failed_count=0,
            results=tuple(RecordResult(record_id=uuid.uuid4().hex) for _ in records),
        )

    def read_records(self, destination: str) -> list[str]:
        """Read back the records delivered to *destination*."""
        target = self._base / f"{destination}.log"
        if not target.exists():
            return []
        records = decode_payload(target.read_bytes()).split(RECORD_SEPARATOR)
        if records[-1] == "":
            records.pop()
        return records
