"""Invocation handler: one stream event in, routed deliveries out.

The handler decodes the event's records, routes them to destinations and
dispatches the batches.  Retry exhaustion is re-raised so the invocation
host sees the failure (and redelivers the event).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from streamroute.config import RelayConfig
from streamroute.delivery.channels import DeliveryChannel
from streamroute.delivery.executor import DeliveryExecutor, RetryExhaustedError
from streamroute.logging_setup import configure_logging
from streamroute.models.delivery import DispatchReport
from streamroute.routing.router import Router
from streamroute.stream.decoder import Deaggregator, decode_stream_event

logger = logging.getLogger(__name__)


class InvocationHandler:
    """Routes and delivers the records of stream events.

    Parameters
    ----------
    config:
        Process configuration.  Read once; routing rules are fixed for the
        lifetime of the handler.
    channel:
        Delivery channel.  Defaults to a ``FirehoseChannel`` in
        ``config.region``, created on first use.
    deaggregator:
        Unpacks aggregated stream entries.  Defaults to ``kpl_deaggregator``.
    """

    def __init__(
        self,
        config: RelayConfig,
        channel: DeliveryChannel | None = None,
        deaggregator: Deaggregator | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._channel = channel
        self._deaggregator = deaggregator
        self._log = log or logger
        self._router = Router(config.routing_config(), log=self._log)

        self._log.info(
            "Initialized handler: region=%s fixed_destination=%s default_destination=%s "
            "routing_label=%s strip_prefix=%s add_prefix=%s substitution_rules=%s",
            config.region,
            config.fixed_destination,
            config.default_destination,
            config.routing_label,
            config.strip_prefix,
            config.add_prefix,
            config.substitution_rules,
        )

    @property
    def channel(self) -> DeliveryChannel:
        if self._channel is None:
            from streamroute.delivery.channels.firehose import FirehoseChannel

            self._channel = FirehoseChannel(region=self._config.region or None)
        return self._channel

    def _executor(self) -> DeliveryExecutor:
        return DeliveryExecutor(
            self.channel,
            default_destination=self._config.default_destination,
            policy=self._config.retry_policy(),
            max_per_batch=self._config.max_records_per_batch,
            max_workers=self._config.max_workers,
            log=self._log,
        )

    def handle_records(self, records: list[str]) -> DispatchReport:
        """Route and deliver already-decoded records."""
        destination_map = self._router.route(records)
        return self._executor().dispatch(destination_map)

    def __call__(self, event: Mapping[str, Any], context: Any = None) -> DispatchReport:
        records = decode_stream_event(event, self._deaggregator)
        try:
            return self.handle_records(records)
        except RetryExhaustedError as exc:
            self._log.error("Invocation failed: %s", exc)
            raise


_handler: InvocationHandler | None = None


def lambda_handler(event: Mapping[str, Any], context: Any = None) -> None:
    """Process entry point.  Builds the handler on the first invocation."""
    global _handler
    if _handler is None:
        config = RelayConfig()
        configure_logging(config.log_level)
        _handler = InvocationHandler(config)
    _handler(event, context)
