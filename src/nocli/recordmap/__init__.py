"""nocli.recordmap -- flattening and normalization of private API record maps.

* :mod:`.flatten` -- ``recordMap`` envelope to ``table -> id -> record``.
* :mod:`.normalize` -- internal block records to public-API-shaped objects.
* :mod:`.block_types` -- block types documented by the public API.
"""

from __future__ import annotations

from .block_types import PUBLIC_API_BLOCK_TYPES, is_public_api_block_type
from .flatten import (
    FlatRecordMap,
    flatten_record_map,
    iter_records,
    table_counts,
    unwrap_record_value,
)
from .normalize import (
    child_block_ids,
    millis_to_iso8601,
    normalize_block_object,
    parent_reference,
    to_partial_user_object,
)

__all__ = [
    "PUBLIC_API_BLOCK_TYPES",
    "FlatRecordMap",
    "child_block_ids",
    "flatten_record_map",
    "is_public_api_block_type",
    "iter_records",
    "millis_to_iso8601",
    "normalize_block_object",
    "parent_reference",
    "table_counts",
    "to_partial_user_object",
    "unwrap_record_value",
]
