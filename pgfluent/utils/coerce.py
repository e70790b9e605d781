"""Conversion of Python values into something the driver can bind."""

import json
from typing import Any

from pydantic import BaseModel


def _jsonable(value: Any) -> Any:
    """Recursively replace Pydantic models with their JSON-mode dumps."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def to_json(value: Any) -> str:
    return json.dumps(_jsonable(value), ensure_ascii=False)


def coerce_value(value: Any) -> Any:
    """Prepare a mutation value for binding.

    - ``None`` and scalars pass through unchanged
    - lists (and tuples) of scalars pass through as native arrays
    - an empty list binds as an empty array (asyncpg encodes arrays from
      sequences only, so the ``'{}'`` text literal is not used)
    - lists containing objects, dicts and models become JSON text
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        if value and isinstance(value[0], (dict, list, tuple, BaseModel)):
            return to_json(value)
        return list(value)
    if isinstance(value, (dict, BaseModel)):
        return to_json(value)
    return value


def json_text(value: Any) -> Any:
    """Text of ``value`` as ``->>`` extracts it from a JSON document.

    ``True`` becomes ``"true"``, ``5`` becomes ``"5"``; strings and ``None``
    are unchanged.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    if isinstance(value, (dict, list, tuple, BaseModel)):
        return to_json(value)
    return str(value)
