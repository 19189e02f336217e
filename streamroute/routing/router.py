"""Router — groups raw records by destination name.

Every record ends up in exactly one bucket.  A fixed destination, when
configured, overrides label-based routing for the whole invocation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from streamroute.models.routing import DestinationMap, RoutingConfig
from streamroute.routing.extractor import extract_label_value
from streamroute.routing.resolver import resolve_destination

logger = logging.getLogger(__name__)


class Router:
    """Maps records onto destination buckets using a ``RoutingConfig``.

    Usage
    -----
    >>> router = Router(RoutingConfig(routing_label="app", default_destination="misc"))
    >>> router.route(["app:web\\tmsg:hi", "msg:no-label"])
    {'web': ['app:web\\tmsg:hi'], 'misc': ['msg:no-label']}
    """

    def __init__(
        self, config: RoutingConfig, log: logging.Logger | None = None
    ) -> None:
        self._config = config
        self._log = log or logger

    @property
    def config(self) -> RoutingConfig:
        return self._config

    def destination_for(self, record: str) -> str:
        """Return the destination a single record routes to."""
        if self._config.is_fixed:
            return self._config.fixed_destination

        value = extract_label_value(record, self._config.routing_label)
        if value == "":
            return self._config.default_destination
        return resolve_destination(value, self._config)

    def route(self, records: Iterable[str]) -> DestinationMap:
        """Group *records* by destination, preserving arrival order."""
        records = list(records)
        if not records:
            return {}

        if self._config.is_fixed:
            result: DestinationMap = {self._config.fixed_destination: records}
        else:
            result = {}
            for record in records:
                result.setdefault(self.destination_for(record), []).append(record)

        self._log.debug(
            "Routed %d records to %d destinations: %s",
            len(records),
            len(result),
            {name: len(bucket) for name, bucket in result.items()},
        )
        return result


def route(records: Iterable[str], config: RoutingConfig) -> DestinationMap:
    """Convenience wrapper around ``Router(config).route(records)``."""
    return Router(config).route(records)
