"""Small helpers shared across the package."""

import json
from typing import Any


def json_dump(value: Any) -> str:
    """
    Render a value for messages the way it would appear in configuration.

    Params:
        value: Any configuration or property value

    Returns:
        JSON text; objects without a JSON form use `str()`, anything
        json cannot encode at all falls back to `repr()`
    """
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return repr(value)
