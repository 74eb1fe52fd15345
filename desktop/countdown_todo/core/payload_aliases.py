"""Payload Aliases — duplicates snake_case payload keys under their camelCase names.

Invariants:
    - Input mapping is never mutated; output is a new dict, superset of the input
    - Keys without "_" pass through unchanged
    - Reapplying to the output adds no new keys

Design Decisions:
    - Dual-write over version negotiation: backend revisions disagree on argument
      naming, sending both keeps the client compatible with all of them.
      Drop once every backend revision accepts a single convention.
"""

import re
from collections.abc import Mapping
from typing import Any


_SNAKE_SEGMENT = re.compile(r"_([a-z])")


def to_camel_case(key: str) -> str:
    """target_at_minute -> targetAtMinute."""
    return _SNAKE_SEGMENT.sub(lambda m: m.group(1).upper(), key)


def with_payload_aliases(payload: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Return a copy of payload with a camelCase duplicate for every snake key."""
    normalized = dict(payload or {})
    for key, value in (payload or {}).items():
        if "_" in key:
            normalized[to_camel_case(key)] = value
    return normalized
