"""Routing models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# destination name -> records in arrival order
DestinationMap = dict[str, list[str]]


class Substitution(BaseModel):
    """A single ``match -> replacement`` rewrite rule.

    Only the first occurrence of ``match`` is replaced when applied.
    """

    model_config = ConfigDict(frozen=True)

    match: str
    replacement: str = ""


class RoutingConfig(BaseModel):
    """Per-invocation routing rules.

    When ``fixed_destination`` is non-empty every record is sent there and
    the label-based rules are ignored entirely.
    """

    model_config = ConfigDict(frozen=True)

    fixed_destination: str = ""
    routing_label: str = ""
    default_destination: str = ""
    strip_prefix: str = ""
    add_prefix: str = ""
    substitutions: tuple[Substitution, ...] = ()

    @property
    def is_fixed(self) -> bool:
        return self.fixed_destination != ""
