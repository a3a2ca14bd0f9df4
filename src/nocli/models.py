"""Result models returned by :class:`nocli.client.NocliClient`.

All types are plain dataclasses.  Each exposes ``to_dict()`` producing the
JSON document the CLI prints.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FetchEndpoint(str, Enum):
    """Endpoint strategy for loading a page chunk."""

    AUTO = "auto"
    """Try ``loadPageChunk`` first, fall back to ``loadCachedPageChunkV2``."""

    LOAD_PAGE_CHUNK = "loadPageChunk"

    LOAD_CACHED_PAGE_CHUNK_V2 = "loadCachedPageChunkV2"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass
class RecordEntry:
    """A flattened record tagged with its table and ID."""

    table: str
    id: str
    object: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"table": self.table, "id": self.id, "object": self.object}


# ---------------------------------------------------------------------------
# Command results
# ---------------------------------------------------------------------------

@dataclass
class PageObjectsResult:
    """Flattened objects of one page chunk.

    Attributes
    ----------
    page_id:
        The canonical page ID that was fetched.
    counts:
        Records per table, before filtering.
    objects:
        One dict per emitted record: a :class:`RecordEntry` dict, or a
        normalized block object with an extra ``table`` key.
    filters:
        The filters that produced *objects*.
    """

    page_id: str
    counts: dict[str, int]
    objects: list[dict[str, Any]] = field(default_factory=list)
    filters: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "page_id": self.page_id,
            "counts": self.counts,
            "objects": self.objects,
            "meta": {"filters": self.filters},
        }


@dataclass
class PageTypesResult:
    """Block types seen in a page chunk versus the public API type list."""

    page_id: str
    seen_block_types: dict[str, int]
    public_api_documented_types: list[str]
    not_in_public_api_type_list: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "page_id": self.page_id,
            "seen_block_types": self.seen_block_types,
            "public_api_documented_types": self.public_api_documented_types,
            "not_in_public_api_type_list": self.not_in_public_api_type_list,
        }


@dataclass
class BlockChildrenResult:
    """Direct children of a block, in ``content`` order."""

    parent_id: str
    children: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"parent_id": self.parent_id, "children": self.children}


@dataclass
class CollectionQueryResult:
    """Flattened records returned by a collection view query."""

    collection_id: str
    view_id: str
    counts: dict[str, int]
    objects: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "collection_id": self.collection_id,
            "view_id": self.view_id,
            "counts": self.counts,
            "objects": self.objects,
        }
