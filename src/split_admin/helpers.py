"""Composite identifiers used to import existing resources."""

from __future__ import annotations

from .exceptions import InvalidCompositeIdError

COMPOSITE_ID_SEPARATOR = ":"


def parse_composite_id(composite_id: str, parts: int) -> list[str]:
    """Split ``composite_id`` into exactly ``parts`` colon-separated values.

    The last value keeps any further colons. Empty values are rejected.
    """
    values = composite_id.split(COMPOSITE_ID_SEPARATOR, parts - 1)
    if len(values) != parts or not all(values):
        raise InvalidCompositeIdError(composite_id, parts)
    return values


def build_composite_id(*values: str) -> str:
    return COMPOSITE_ID_SEPARATOR.join(values)
