"""Delivery channel protocol and error types.

All channels implement the ``DeliveryChannel`` protocol: a
``channel_name`` property and a ``put_batch(destination, records)``
method.  A call either returns a ``PutBatchResult`` (possibly reporting
per-record failures) or raises a ``ChannelError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from streamroute.models.delivery import PutBatchResult


class ChannelError(RuntimeError):
    """Raised when a whole ``put_batch`` call fails."""


class DestinationNotFoundError(ChannelError):
    """Raised when the target destination does not exist."""


@runtime_checkable
class DeliveryChannel(Protocol):
    """Protocol that every delivery channel must implement.

    Implementations must be safe to call from several threads at once;
    the executor shares one channel across all concurrent deliveries.

    Attributes
    ----------
    channel_name : str
        A human-readable identifier (e.g. ``"firehose"``, ``"local_file"``).
    """

    @property
    def channel_name(self) -> str:
        """Return the name of this channel."""
        ...

    def put_batch(self, destination: str, records: Sequence[str]) -> PutBatchResult:
        """Deliver *records* to *destination* in one call.

        Parameters
        ----------
        destination:
            Name of the target delivery stream.
        records:
            Payloads in order, each already terminated by a separator.

        Raises
        ------
        DestinationNotFoundError
            If *destination* does not exist.
        ChannelError
            For any other call-level failure.
        """
        ...


__all__ = ["ChannelError", "DeliveryChannel", "DestinationNotFoundError"]
