"""streamroute: route stream records to delivery streams.

v0.1.0:
  - Label-based routing of LTSV records with prefix and substitution rules
  - Fixed-destination override and default-destination fallback
  - Count-bounded batching (500 records per call)
  - Concurrent delivery with fixed-interval retry (5 retries, 500 ms)
  - Missing destinations rerouted to the default destination
  - Firehose channel (boto3) and local file channel
  - Env-driven config via pydantic-settings, Typer CLI
"""

__version__ = "0.1.0"
__description__ = "Route Kinesis-style stream records into Firehose-style delivery streams"

from streamroute.delivery.executor import DeliveryExecutor, RetryExhaustedError
from streamroute.handler import InvocationHandler, lambda_handler
from streamroute.routing.router import Router, route

__all__ = [
    "DeliveryExecutor",
    "InvocationHandler",
    "RetryExhaustedError",
    "Router",
    "lambda_handler",
    "route",
    "__version__",
]
