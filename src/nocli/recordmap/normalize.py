"""Best-effort translation of internal block records into public API shape.

The public API describes a block as::

    {"object": "block", "id": ..., "type": "paragraph",
     "parent": {"type": "page_id", ...}, "created_time": "2023-...Z",
     "has_children": false, "archived": false, "paragraph": {...}}

Internal records carry the same information under different names
(``parent_table``/``parent_id``, epoch-millisecond timestamps, ``alive``,
``content``).  :func:`normalize_block_object` maps what it can and keeps
the untouched record under ``private_value``; per-type property values
are not transcoded.

Every field is derived independently.  A missing or wrongly-typed input
field omits the output field rather than emitting a zero value.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# parent_table -> parent.type; every other table maps to block_id.
_PARENT_TYPES: dict[str, str] = {
    "collection": "database_id",
    "space": "workspace",
}


# ---------------------------------------------------------------------------
# Field accessors
# ---------------------------------------------------------------------------

def _str_field(record: dict[str, Any], key: str) -> str | None:
    """Return ``record[key]`` if it is a non-empty string, else ``None``."""
    value = record.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _list_field(record: dict[str, Any], key: str) -> list[Any]:
    value = record.get(key)
    return value if isinstance(value, list) else []


def _dict_field(record: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = record.get(key)
    return value if isinstance(value, dict) else None


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _to_millis(value: Any) -> int | None:
    # bool is an int subclass but never a timestamp.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    return value


def millis_to_iso8601(value: Any) -> str | None:
    """Convert epoch milliseconds to an RFC 3339 UTC timestamp.

    Fractional seconds are written only when non-zero, without trailing
    zeros.  Returns ``None`` for non-numeric, non-positive or
    out-of-range input.

    Examples
    --------
    >>> millis_to_iso8601(1700000000000)
    '2023-11-14T22:13:20Z'
    >>> millis_to_iso8601(1700000000120)
    '2023-11-14T22:13:20.12Z'
    >>> millis_to_iso8601(0) is None
    True
    """
    ms = _to_millis(value)
    if ms is None or ms <= 0:
        return None
    seconds, millis = divmod(ms, 1000)
    try:
        moment = _EPOCH + timedelta(seconds=seconds)
    except OverflowError:
        return None
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if millis:
        text += "." + f"{millis:03d}".rstrip("0")
    return text + "Z"


def to_partial_user_object(user_id: Any) -> dict[str, str] | None:
    """Return ``{"object": "user", "id": user_id}``, or ``None`` for a blank ID."""
    if not isinstance(user_id, str) or not user_id.strip():
        return None
    return {"object": "user", "id": user_id}


def parent_reference(parent_id: str, parent_table: str | None) -> dict[str, Any]:
    """Map an internal parent pointer to a public API ``parent`` object.

    ``collection`` parents become ``database_id`` and ``space`` parents
    become ``workspace`` (the space ID is not echoed).  Every other table,
    including unknown and missing ones, maps to ``block_id``.
    """
    parent_type = _PARENT_TYPES.get(parent_table or "", "block_id")
    if parent_type == "workspace":
        return {"type": "workspace", "workspace": True}
    return {"type": parent_type, parent_type: parent_id}


def child_block_ids(block: dict[str, Any]) -> list[str]:
    """Return the stripped, non-blank string IDs in ``content``, in order."""
    ids: list[str] = []
    for item in _list_field(block, "content"):
        if isinstance(item, str) and item.strip():
            ids.append(item.strip())
    return ids


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

def normalize_block_object(block: dict[str, Any]) -> dict[str, Any]:
    """Convert one flattened block record into a public-API-shaped object.

    Parameters
    ----------
    block:
        A record from the ``block`` table of a flattened record map.

    Returns
    -------
    dict
        Always holds ``object``, ``has_children`` and ``private_value``
        (the input record itself).  ``id``, ``type``, ``parent``,
        timestamps, authors, ``archived``/``in_trash`` and the type-named
        payload appear only when derivable.
    """
    obj: dict[str, Any] = {"object": "block"}

    block_id = _str_field(block, "id")
    if block_id is not None:
        obj["id"] = block_id
    block_type = _str_field(block, "type")
    if block_type is not None:
        obj["type"] = block_type

    parent_id = _str_field(block, "parent_id")
    if parent_id is not None:
        obj["parent"] = parent_reference(parent_id, _str_field(block, "parent_table"))

    for key in ("created_time", "last_edited_time"):
        stamp = millis_to_iso8601(block.get(key))
        if stamp is not None:
            obj[key] = stamp

    for source, target in (("created_by_id", "created_by"), ("last_edited_by_id", "last_edited_by")):
        user = to_partial_user_object(_str_field(block, source))
        if user is not None:
            obj[target] = user

    alive = block.get("alive")
    if isinstance(alive, bool):
        # Two generations of the public schema name the same flag.
        obj["archived"] = not alive
        obj["in_trash"] = not alive

    content = _list_field(block, "content")
    obj["has_children"] = len(content) > 0

    if block_type is not None:
        payload: dict[str, Any] = {}
        properties = _dict_field(block, "properties")
        if properties is not None:
            payload["properties"] = properties
        fmt = _dict_field(block, "format")
        if fmt is not None:
            payload["format"] = fmt
        if content:
            payload["children"] = content
        if payload:
            obj[block_type] = payload

    obj["private_value"] = block
    return obj
