"""Synchronous client for the private API.

:class:`NocliClient` wires the transport, the endpoint wrappers and the
record-map pipeline together.  Every public method performs one command:
normalize the ID arguments, issue one or two requests, flatten and
optionally normalize the records, and return a plain result.

Usage::

    from nocli import NocliClient

    with NocliClient(token_v2="...", notion_user_id="...") as client:
        result = client.page_objects("https://www.notion.so/My-Page-<32 hex>")
        print(result.counts)
"""

from __future__ import annotations

from typing import Any

import httpx

from nocli.config import NocliConfig
from nocli.errors import NocliError, NocliRecordNotFoundError
from nocli.models import (
    BlockChildrenResult,
    CollectionQueryResult,
    FetchEndpoint,
    PageObjectsResult,
    PageTypesResult,
    RecordEntry,
)
from nocli.observability import get_logger
from nocli.private_api.collections import CollectionAPI
from nocli.private_api.pages import PageAPI
from nocli.private_api.records import RecordAPI
from nocli.private_api.transport import PrivateTransport
from nocli.recordmap import (
    PUBLIC_API_BLOCK_TYPES,
    FlatRecordMap,
    child_block_ids,
    flatten_record_map,
    is_public_api_block_type,
    iter_records,
    normalize_block_object,
    table_counts,
)
from nocli.utils.ids import parse_page_id

log = get_logger("nocli.client")

DEFAULT_COLLECTION_LIMIT = 500


def _entries(flat: FlatRecordMap) -> list[dict[str, Any]]:
    return [
        RecordEntry(table=name, id=record_id, object=record).to_dict()
        for name, record_id, record in iter_records(flat)
    ]


class NocliClient:
    """Synchronous private API client.

    Parameters
    ----------
    config:
        A fully resolved :class:`NocliConfig`.  When omitted, one is built
        from *kwargs*.
    http_transport:
        Optional :class:`httpx.BaseTransport` for the underlying HTTP
        client (tests pass an ``httpx.MockTransport``).
    **kwargs:
        Forwarded to :class:`NocliConfig` when *config* is not given.
    """

    def __init__(
        self,
        config: NocliConfig | None = None,
        *,
        http_transport: httpx.BaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        if config is not None and kwargs:
            raise TypeError("pass either a NocliConfig or config keyword arguments, not both")
        self._config = config if config is not None else NocliConfig(**kwargs)
        self._transport = PrivateTransport(self._config, http_transport=http_transport)
        self._pages = PageAPI(self._transport)
        self._records = RecordAPI(self._transport)
        self._collections = CollectionAPI(self._transport, self._config.user_time_zone)

    @property
    def config(self) -> NocliConfig:
        return self._config

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def _load_page(self, page_id: str, endpoint: FetchEndpoint | str) -> dict[str, Any]:
        endpoint = FetchEndpoint(endpoint)
        if endpoint is FetchEndpoint.LOAD_PAGE_CHUNK:
            return self._pages.load_page_chunk(page_id)
        if endpoint is FetchEndpoint.LOAD_CACHED_PAGE_CHUNK_V2:
            return self._pages.load_cached_page_chunk_v2(page_id)
        try:
            return self._pages.load_page_chunk(page_id)
        except NocliError as exc:
            log.warning(
                "loadPageChunk failed, falling back to loadCachedPageChunkV2",
                extra={
                    "extra_fields": {
                        "op": "load_page",
                        "page_id": page_id,
                        "error_code": str(exc.code),
                        "error": exc.message,
                    }
                },
            )
            return self._pages.load_cached_page_chunk_v2(page_id)

    def fetch_page(
        self,
        url_or_id: str,
        endpoint: FetchEndpoint | str = FetchEndpoint.AUTO,
    ) -> dict[str, Any]:
        """Fetch the raw response envelope of a page's first chunk.

        Parameters
        ----------
        url_or_id:
            Page URL or ID in any form :func:`parse_page_id` accepts.
        endpoint:
            ``auto`` (default) tries ``loadPageChunk`` and falls back to
            ``loadCachedPageChunkV2`` on any error.

        Returns
        -------
        dict
            The unmodified response.
        """
        page_id = parse_page_id(url_or_id)
        return self._load_page(page_id, endpoint)

    def page_records(self, url_or_id: str) -> tuple[str, FlatRecordMap]:
        """Fetch a page chunk and return ``(page_id, flattened record map)``."""
        page_id = parse_page_id(url_or_id)
        return page_id, flatten_record_map(self._load_page(page_id, FetchEndpoint.AUTO))

    def page_objects(
        self,
        url_or_id: str,
        table: str | None = None,
        block_type: str | None = None,
        notion_block_like: bool = False,
    ) -> PageObjectsResult:
        """Expose the flattened records of a page chunk as a list of objects.

        Parameters
        ----------
        table:
            Only emit records of this table.
        block_type:
            Only emit ``block`` records of this type (case-insensitive).
            Records of other tables are not affected.
        notion_block_like:
            Emit ``block`` records as normalized public-API-shaped objects
            (with an added ``table`` key) instead of ``{table, id, object}``.
        """
        page_id, flat = self.page_records(url_or_id)
        table_filter = (table or "").strip()
        type_filter = (block_type or "").strip().lower()

        objects: list[dict[str, Any]] = []
        for name, record_id, record in iter_records(flat, table_filter or None):
            if name == "block":
                if type_filter:
                    record_type = record.get("type")
                    if not isinstance(record_type, str) or record_type.strip().lower() != type_filter:
                        continue
                if notion_block_like:
                    normalized = normalize_block_object(record)
                    normalized["table"] = name
                    objects.append(normalized)
                    continue
            objects.append(RecordEntry(table=name, id=record_id, object=record).to_dict())

        return PageObjectsResult(
            page_id=page_id,
            counts=table_counts(flat),
            objects=objects,
            filters={
                "table": table_filter,
                "block_type": type_filter,
                "notion_block_like": notion_block_like,
            },
        )

    def page_types(self, url_or_id: str) -> PageTypesResult:
        """Count the block types of a page and diff them against the public list."""
        page_id, flat = self.page_records(url_or_id)
        seen: dict[str, int] = {}
        for record in flat.get("block", {}).values():
            record_type = record.get("type")
            if not isinstance(record_type, str):
                continue
            record_type = record_type.strip().lower()
            if record_type:
                seen[record_type] = seen.get(record_type, 0) + 1

        return PageTypesResult(
            page_id=page_id,
            seen_block_types=seen,
            public_api_documented_types=list(PUBLIC_API_BLOCK_TYPES),
            not_in_public_api_type_list=sorted(
                t for t in seen if not is_public_api_block_type(t)
            ),
        )

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _block_output(self, block_id: str, record: dict[str, Any], notion_block_like: bool) -> dict[str, Any]:
        if notion_block_like:
            return normalize_block_object(record)
        return {"id": block_id, "object": record}

    def get_block(self, block_id: str, notion_block_like: bool = False) -> dict[str, Any]:
        """Fetch one block record.

        When the response does not hold the requested ID (the API may key
        it differently), the first block of the response is used.

        Raises
        ------
        NocliRecordNotFoundError
            If the response holds no block at all.
        """
        block_id = parse_page_id(block_id)
        blocks = flatten_record_map(self._records.sync_block_records([block_id])).get("block", {})
        record = blocks.get(block_id)
        if record is None and blocks:
            first_id = min(blocks)
            log.debug(
                "Requested block missing from response, using first block",
                extra={"extra_fields": {"op": "get_block", "block_id": block_id, "used": first_id}},
            )
            record = blocks[first_id]
        if record is None:
            raise NocliRecordNotFoundError(
                "block not found in response",
                context={"table": "block", "record_id": block_id},
            )
        return self._block_output(block_id, record, notion_block_like)

    def block_children(self, block_id: str, notion_block_like: bool = False) -> BlockChildrenResult:
        """Fetch the direct children of a block.

        The parent is fetched first to read its ``content`` list, then all
        children are fetched in one batched call.  Children missing from
        the second response are skipped.

        Raises
        ------
        NocliRecordNotFoundError
            If the parent block is not in the first response.
        """
        block_id = parse_page_id(block_id)
        parent = flatten_record_map(self._records.sync_block_records([block_id])).get("block", {}).get(block_id)
        if parent is None:
            raise NocliRecordNotFoundError(
                "parent block not found",
                context={"table": "block", "record_id": block_id},
            )

        child_ids = child_block_ids(parent)
        if not child_ids:
            return BlockChildrenResult(parent_id=block_id)

        blocks = flatten_record_map(self._records.sync_block_records(child_ids)).get("block", {})
        children: list[dict[str, Any]] = []
        for child_id in child_ids:
            record = blocks.get(child_id)
            if record is None:
                log.debug(
                    "Child block missing from response",
                    extra={"extra_fields": {"op": "block_children", "parent_id": block_id, "child_id": child_id}},
                )
                continue
            children.append(self._block_output(child_id, record, notion_block_like))

        return BlockChildrenResult(parent_id=block_id, children=children)

    # ------------------------------------------------------------------
    # Collections & users
    # ------------------------------------------------------------------

    def query_collection(
        self,
        collection_id: str,
        view_id: str,
        limit: int = DEFAULT_COLLECTION_LIMIT,
        flatten: bool = False,
    ) -> dict[str, Any] | CollectionQueryResult:
        """Run a collection view's default query.

        Returns the raw response, or a :class:`CollectionQueryResult` of
        flattened records when *flatten* is set.
        """
        collection_id = parse_page_id(collection_id)
        view_id = parse_page_id(view_id)
        response = self._collections.query(collection_id, view_id, limit)
        if not flatten:
            return response

        flat = flatten_record_map(response)
        return CollectionQueryResult(
            collection_id=collection_id,
            view_id=view_id,
            counts=table_counts(flat),
            objects=_entries(flat),
        )

    def get_users(self, user_ids: list[str]) -> dict[str, dict[str, Any]]:
        """Fetch user records; returns the flattened ``notion_user`` table."""
        ids = [parse_page_id(uid) for uid in user_ids]
        return flatten_record_map(self._records.get_users(ids)).get("notion_user", {})

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._transport.close()

    def __enter__(self) -> NocliClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
