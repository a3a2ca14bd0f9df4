"""Collection (database) query endpoint of the private API."""

from __future__ import annotations

from typing import Any

from nocli.config import DEFAULT_USER_TIME_ZONE

from .transport import PrivateTransport

QUERY_COLLECTION = "/api/v3/queryCollection"

DEFAULT_QUERY_LIMIT = 100


def build_query_payload(
    collection_id: str,
    view_id: str,
    limit: int = DEFAULT_QUERY_LIMIT,
    user_time_zone: str = DEFAULT_USER_TIME_ZONE,
) -> dict[str, Any]:
    """Build the reducer-loader payload the web app sends on initial load.

    No filter, no sort and no search query are applied; a non-positive
    *limit* falls back to :data:`DEFAULT_QUERY_LIMIT`.
    """
    if limit <= 0:
        limit = DEFAULT_QUERY_LIMIT
    return {
        "collection": {"id": collection_id},
        "collectionView": {"id": view_id},
        "source": {"type": "collection", "id": collection_id},
        "loader": {
            "type": "reducer",
            "reducers": {
                "collection_group_results": {
                    "type": "results",
                    "limit": limit,
                    "loadContentCover": True,
                },
            },
            "sort": [],
            "filter": {"filters": [], "operator": "and"},
            "searchQuery": "",
            "userTimeZone": user_time_zone,
        },
    }


class CollectionAPI:
    """Wrapper for ``queryCollection``.

    Parameters
    ----------
    transport:
        A configured :class:`PrivateTransport` instance.
    user_time_zone:
        Time zone reported with every query.
    """

    def __init__(
        self,
        transport: PrivateTransport,
        user_time_zone: str = DEFAULT_USER_TIME_ZONE,
    ) -> None:
        self._transport = transport
        self._user_time_zone = user_time_zone

    def query(
        self,
        collection_id: str,
        view_id: str,
        limit: int = DEFAULT_QUERY_LIMIT,
    ) -> dict[str, Any]:
        """Run the default query of *view_id* over *collection_id*.

        Returns
        -------
        dict
            The raw response envelope: ``result`` plus a ``recordMap``
            holding the matched rows.
        """
        body = build_query_payload(collection_id, view_id, limit, self._user_time_zone)
        return self._transport.post_json(
            QUERY_COLLECTION, body, params={"src": "initial_load"}
        )
