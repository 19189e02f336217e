"""streamroute data models (Pydantic v2, frozen)."""

from streamroute.models.delivery import (
    Batch,
    DeliveryReport,
    DeliveryStatus,
    DispatchReport,
    PutBatchResult,
    RecordResult,
)
from streamroute.models.routing import DestinationMap, RoutingConfig, Substitution

__all__ = [
    # routing
    "DestinationMap",
    "RoutingConfig",
    "Substitution",
    # delivery
    "Batch",
    "RecordResult",
    "PutBatchResult",
    "DeliveryStatus",
    "DeliveryReport",
    "DispatchReport",
]
