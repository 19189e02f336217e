"""Tests for RelayConfig — env-driven settings."""

from __future__ import annotations

import pytest

from streamroute.config import RelayConfig
from streamroute.models.routing import Substitution

_ENV_KEYS = [
    "STREAMROUTE_FIXED_DESTINATION", "FixedDestination", "DeliveryStream",
    "STREAMROUTE_DEFAULT_DESTINATION", "DefaultDestination", "DefaultStream",
    "STREAMROUTE_ROUTING_LABEL", "RoutingLabel", "TargetColumn",
    "STREAMROUTE_SUBSTITUTION_RULES", "SubstitutionRules", "ReplacePattern",
    "STREAMROUTE_REGION", "Region",
    "STREAMROUTE_MAX_RECORDS_PER_BATCH", "STREAMROUTE_MAX_WORKERS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestRelayConfig:
    def test_defaults(self):
        config = RelayConfig(_env_file=None)
        assert config.fixed_destination == ""
        assert config.max_records_per_batch == 500
        assert config.max_retries == 5
        assert config.retry_interval_ms == 500
        assert config.max_workers is None
        assert config.log_level == "INFO"

    def test_init_by_field_name(self):
        config = RelayConfig(_env_file=None, routing_label="app", default_destination="fh-d")
        assert config.routing_label == "app"
        assert config.default_destination == "fh-d"

    def test_prefixed_env_vars(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("STREAMROUTE_ROUTING_LABEL", "service")
        monkeypatch.setenv("STREAMROUTE_MAX_RECORDS_PER_BATCH", "100")
        config = RelayConfig(_env_file=None)
        assert config.routing_label == "service"
        assert config.max_records_per_batch == 100

    def test_legacy_env_names(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FixedDestination", "fh-all")
        monkeypatch.setenv("DefaultDestination", "fh-misc")
        monkeypatch.setenv("Region", "ap-northeast-1")
        config = RelayConfig(_env_file=None)
        assert config.fixed_destination == "fh-all"
        assert config.default_destination == "fh-misc"
        assert config.region == "ap-northeast-1"

    def test_routing_config_parses_rules(self):
        config = RelayConfig(
            _env_file=None,
            routing_label="app",
            strip_prefix="app-",
            add_prefix="fh-",
            substitution_rules="-prod/,broken,-stg/-staging",
        )
        routing = config.routing_config()
        assert routing.routing_label == "app"
        assert routing.substitutions == (
            Substitution(match="-prod", replacement=""),
            Substitution(match="-stg", replacement="-staging"),
        )

    def test_retry_policy(self):
        policy = RelayConfig(_env_file=None, max_retries=3, retry_interval_ms=250).retry_policy()
        assert policy.max_retries == 3
        assert policy.retry_interval == 0.25

    def test_batch_limit_capped(self):
        with pytest.raises(ValueError):
            RelayConfig(_env_file=None, max_records_per_batch=501)
