"""Routing: maps each raw record to a destination name.

A record's destination comes from the value of a configured label
(``label:value`` fields separated by tabs), rewritten by prefix and
substitution rules.  Records with no such label go to the default
destination.  A fixed destination overrides all of this.
"""

from streamroute.routing.extractor import extract_label_value
from streamroute.routing.resolver import parse_substitution_rules, resolve_destination
from streamroute.routing.router import Router, route

__all__ = [
    "Router",
    "extract_label_value",
    "parse_substitution_rules",
    "resolve_destination",
    "route",
]
