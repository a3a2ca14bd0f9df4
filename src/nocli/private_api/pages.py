"""Page chunk endpoints of the private API.

Provides :class:`PageAPI`, a thin wrapper around the two endpoints the web
app uses to load a page's record map.  Both request a single chunk only;
following the returned cursor is out of scope.
"""

from __future__ import annotations

from typing import Any

from .transport import PrivateTransport

LOAD_PAGE_CHUNK = "/api/v3/loadPageChunk"
LOAD_CACHED_PAGE_CHUNK_V2 = "/api/v3/loadCachedPageChunkV2"

DEFAULT_CHUNK_LIMIT = 100


def _chunk_fields(limit: int) -> dict[str, Any]:
    return {
        "limit": limit,
        "chunkNumber": 0,
        "cursor": {"stack": []},
        "verticalColumns": False,
    }


class PageAPI:
    """Wrapper for the page chunk endpoints.

    Parameters
    ----------
    transport:
        A configured :class:`PrivateTransport` instance.
    """

    def __init__(self, transport: PrivateTransport) -> None:
        self._transport = transport

    def load_page_chunk(self, page_id: str, limit: int = DEFAULT_CHUNK_LIMIT) -> dict[str, Any]:
        """Load the first chunk of *page_id* via ``loadPageChunk``.

        Parameters
        ----------
        page_id:
            Hyphenated page UUID.
        limit:
            Maximum number of blocks in the chunk.

        Returns
        -------
        dict
            The raw response envelope, including ``recordMap``.
        """
        body = {"pageId": page_id, **_chunk_fields(limit)}
        return self._transport.post_json(LOAD_PAGE_CHUNK, body)

    def load_cached_page_chunk_v2(
        self,
        page_id: str,
        limit: int = DEFAULT_CHUNK_LIMIT,
    ) -> dict[str, Any]:
        """Load the first chunk of *page_id* via ``loadCachedPageChunkV2``.

        Same as :meth:`load_page_chunk` except that the page is passed as a
        ``{"id": ...}`` reference.
        """
        body = {"page": {"id": page_id}, **_chunk_fields(limit)}
        return self._transport.post_json(LOAD_CACHED_PAGE_CHUNK_V2, body)
