"""Record-map flattening.

Private API responses bundle heterogeneous tables in a ``recordMap``
envelope::

    {"recordMap": {
        "block": {
            "<id>": {"value": {"value": {"id": "<id>", "type": "page", ...},
                               "role": "editor"}},
        },
        "notion_user": {...},
        "__version__": 3
    }}

Depending on the endpoint and API generation, each record is wrapped in
zero or more ``value`` containers.  :func:`flatten_record_map` strips them
and returns ``table -> id -> record``.

The response shape is not contractually guaranteed, so nothing here
raises: malformed input degrades to an empty result.
"""

from __future__ import annotations

from typing import Any

FlatRecordMap = dict[str, dict[str, dict[str, Any]]]

_RESERVED_TABLE_PREFIX = "__"


def unwrap_record_value(wrapped: Any) -> dict[str, Any] | None:
    """Descend through nested ``value`` keys to the innermost record.

    Descent stops at the first level without a ``value`` key, or whose
    ``value`` is not an object.  Returns ``None`` when *wrapped* is not an
    object or unwraps to an empty object.

    Examples
    --------
    >>> unwrap_record_value({"value": {"value": {"id": "a"}, "role": "reader"}})
    {'id': 'a'}
    >>> unwrap_record_value({"value": "scalar", "id": "b"})
    {'value': 'scalar', 'id': 'b'}
    >>> unwrap_record_value({"value": {}}) is None
    True
    """
    if not isinstance(wrapped, dict):
        return None

    current = wrapped
    while True:
        inner = current.get("value")
        if not isinstance(inner, dict):
            break
        current = inner

    return current or None


def flatten_record_map(payload: Any) -> FlatRecordMap:
    """Convert a raw response envelope into ``table -> id -> record``.

    Tables whose name starts with ``__`` are reserved and skipped, as are
    tables whose value is not an object.  Records that unwrap to nothing
    are dropped, and a table left without records is omitted entirely.

    Parameters
    ----------
    payload:
        The decoded response.  Anything other than a dict with a dict
        ``recordMap`` yields ``{}``.

    Returns
    -------
    dict
        A new mapping.  Record dicts are the innermost objects of the
        input, not copies.
    """
    out: FlatRecordMap = {}
    if not isinstance(payload, dict):
        return out
    record_map = payload.get("recordMap")
    if not isinstance(record_map, dict):
        return out

    for table, rows_raw in record_map.items():
        if not isinstance(rows_raw, dict) or str(table).startswith(_RESERVED_TABLE_PREFIX):
            continue
        rows: dict[str, dict[str, Any]] = {}
        for record_id, wrapped in rows_raw.items():
            record = unwrap_record_value(wrapped)
            if record is not None:
                rows[record_id] = record
        if rows:
            out[table] = rows

    return out


def table_counts(flat: FlatRecordMap) -> dict[str, int]:
    """Number of records per table."""
    return {table: len(rows) for table, rows in flat.items()}


def iter_records(flat: FlatRecordMap, table: str | None = None):
    """Yield ``(table, id, record)`` in lexicographic table then ID order.

    When *table* is given, only that table is visited.
    """
    for name in sorted(flat):
        if table and name != table:
            continue
        rows = flat[name]
        for record_id in sorted(rows):
            yield name, record_id, rows[record_id]
