"""Label lookup for tab-separated ``label:value`` records (LTSV)."""

from __future__ import annotations

FIELD_SEPARATOR = "\t"
LABEL_SEPARATOR = ":"


def extract_label_value(record: str, label: str) -> str:
    """Return the value of the first field labelled *label*, or ``""``.

    Fields without a colon are skipped.  Only the first colon splits label
    from value, so values may themselves contain colons.

    Examples
    --------
    >>> extract_label_value("host:web-1\\ttime:12:00:01", "time")
    '12:00:01'
    >>> extract_label_value("garbage", "host")
    ''
    """
    for field in record.split(FIELD_SEPARATOR):
        name, sep, value = field.partition(LABEL_SEPARATOR)
        if not sep:
            continue
        if name == label:
            return value
    return ""
