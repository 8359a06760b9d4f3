"""General utility helpers shared across modules."""

from __future__ import annotations

import json
import math
from typing import Any, Optional


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to ``digits`` decimals with ties going up.

    ``round`` uses banker's rounding, which would turn 0.125 km into 0.12.
    """

    factor = 10.0**digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Return ``value`` half-up rounded to a whole number."""

    return int(math.floor(value + 0.5))


def _normalise_value(value: Any) -> Any:
    """Convert objects to JSON-friendly representations."""

    if isinstance(value, set):
        return sorted(_normalise_value(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [_normalise_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _normalise_value(val) for key, val in value.items()}
    return value


def json_dumps_sorted(value: Any, indent: Optional[int] = None) -> str:
    """Return canonical JSON (sorted keys) for hashing, comparisons and output.

    Without ``indent`` the output is compact; with it, pretty-printed.
    """

    normalised = _normalise_value(value)
    if indent:
        return json.dumps(normalised, sort_keys=True, indent=indent)
    return json.dumps(normalised, sort_keys=True, separators=(",", ":"))
