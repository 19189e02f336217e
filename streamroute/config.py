"""Env-driven runtime configuration, loaded once per process.

Settings are read from ``STREAMROUTE_*`` environment variables or a
``.env`` file.  The routing settings also accept the bare key names used by
existing deployments (``FixedDestination``, ``DefaultDestination``, ...).
"""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from streamroute.delivery.batcher import MAX_RECORDS_PER_BATCH
from streamroute.delivery.retry import MAX_RETRIES, RetryPolicy
from streamroute.models.routing import RoutingConfig
from streamroute.routing.resolver import parse_substitution_rules


def _env(name: str, *legacy: str) -> AliasChoices:
    return AliasChoices(f"STREAMROUTE_{name.upper()}", *legacy)


class RelayConfig(BaseSettings):
    """Process configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export STREAMROUTE_ROUTING_LABEL=app
        export STREAMROUTE_DEFAULT_DESTINATION=fh-misc
        export STREAMROUTE_SUBSTITUTION_RULES="-prod/,-stg/-staging"

    Or with the legacy names::

        RoutingLabel=app
        DefaultDestination=fh-misc
        ReplacePattern=-prod/
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STREAMROUTE_",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    # Routing
    fixed_destination: str = Field(
        default="", validation_alias=_env("fixed_destination", "FixedDestination", "DeliveryStream")
    )
    default_destination: str = Field(
        default="", validation_alias=_env("default_destination", "DefaultDestination", "DefaultStream")
    )
    routing_label: str = Field(
        default="", validation_alias=_env("routing_label", "RoutingLabel", "TargetColumn")
    )
    strip_prefix: str = Field(
        default="", validation_alias=_env("strip_prefix", "StripPrefix", "RemovePrefix")
    )
    add_prefix: str = Field(
        default="", validation_alias=_env("add_prefix", "AddPrefix")
    )
    substitution_rules: str = Field(
        default="", validation_alias=_env("substitution_rules", "SubstitutionRules", "ReplacePattern")
    )

    # Delivery channel
    region: str = Field(default="", validation_alias=_env("region", "Region"))

    # Delivery tuning
    max_records_per_batch: int = Field(default=MAX_RECORDS_PER_BATCH, ge=1, le=MAX_RECORDS_PER_BATCH)
    max_retries: int = Field(default=MAX_RETRIES, ge=0)
    retry_interval_ms: int = Field(default=500, ge=0)
    max_workers: int | None = Field(default=None, ge=1)

    # Observability
    log_level: str = "INFO"

    def routing_config(self) -> RoutingConfig:
        """Build the immutable ``RoutingConfig`` for one invocation."""
        return RoutingConfig(
            fixed_destination=self.fixed_destination,
            routing_label=self.routing_label,
            default_destination=self.default_destination,
            strip_prefix=self.strip_prefix,
            add_prefix=self.add_prefix,
            substitutions=parse_substitution_rules(self.substitution_rules),
        )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            retry_interval=self.retry_interval_ms / 1000,
        )
