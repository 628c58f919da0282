"""
Shared helpers for turning results into tool responses.
"""

import json
import math
from typing import Any


def to_json(payload: Any) -> str:
    """Pretty JSON for assistant-facing output."""
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def hours(value: Any) -> Any:
    """Render a numeric hour count as "<n>h"; falsy values become None."""
    if not value:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}h"


def percent(part: Any, total: Any) -> str:
    """Whole-number percentage rounded half up, 0% when the total is empty."""
    if not total:
        return "0%"
    return f"{math.floor(((part or 0) / total) * 100 + 0.5)}%"
