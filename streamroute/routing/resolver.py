"""Destination-name rewriting rules.

Turns an extracted routing value into a delivery destination name by
stripping a prefix, applying ordered substitutions, then adding a prefix.
"""

from __future__ import annotations

from streamroute.models.routing import RoutingConfig, Substitution

RULE_SEPARATOR = ","
PAIR_SEPARATOR = "/"


def resolve_destination(value: str, config: RoutingConfig) -> str:
    """Map an extracted routing value to a destination name.

    No validation is done on the result; an empty string is a legal
    destination.

    Examples
    --------
    >>> cfg = RoutingConfig(
    ...     strip_prefix="app-",
    ...     substitutions=(Substitution(match="-prod", replacement=""),),
    ...     add_prefix="fh-",
    ... )
    >>> resolve_destination("app-service-prod", cfg)
    'fh-service'
    """
    result = value
    if config.strip_prefix and result.startswith(config.strip_prefix):
        result = result[len(config.strip_prefix):]

    for rule in config.substitutions:
        result = result.replace(rule.match, rule.replacement, 1)

    return config.add_prefix + result


def parse_substitution_rules(text: str) -> tuple[Substitution, ...]:
    """Parse ``"match/replacement,match/replacement"`` into rules.

    Entries without a ``/`` are dropped silently.  The first ``/`` splits
    match from replacement, so replacements may contain further slashes.

    >>> parse_substitution_rules("a/b,c")
    (Substitution(match='a', replacement='b'),)
    """
    rules: list[Substitution] = []
    for entry in text.split(RULE_SEPARATOR):
        match, sep, replacement = entry.partition(PAIR_SEPARATOR)
        if not sep:
            continue
        rules.append(Substitution(match=match, replacement=replacement))
    return tuple(rules)
