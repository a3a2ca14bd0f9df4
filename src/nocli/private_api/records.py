"""Record lookup endpoints of the private API."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .transport import PrivateTransport

SYNC_RECORD_VALUES = "/api/v3/syncRecordValuesMain"
GET_RECORD_VALUES = "/api/v3/getRecordValues"

LATEST_VERSION = -1


def record_requests(table: str, record_ids: Iterable[str]) -> list[dict[str, Any]]:
    """Build ``{table, id, version}`` request entries asking for the latest version."""
    return [{"table": table, "id": rid, "version": LATEST_VERSION} for rid in record_ids]


class RecordAPI:
    """Wrapper for batched record lookups.

    Parameters
    ----------
    transport:
        A configured :class:`PrivateTransport` instance.
    """

    def __init__(self, transport: PrivateTransport) -> None:
        self._transport = transport

    def sync_record_values(self, table: str, record_ids: Iterable[str]) -> dict[str, Any]:
        """Fetch records of one *table* in a single ``syncRecordValuesMain`` call."""
        body = {"requests": record_requests(table, record_ids)}
        return self._transport.post_json(SYNC_RECORD_VALUES, body)

    def sync_block_records(self, block_ids: Iterable[str]) -> dict[str, Any]:
        """Fetch block records in one batched call.

        Parameters
        ----------
        block_ids:
            Hyphenated block UUIDs.

        Returns
        -------
        dict
            The raw response envelope; blocks live under
            ``recordMap.block``.
        """
        return self.sync_record_values("block", block_ids)

    def get_users(self, user_ids: Iterable[str]) -> dict[str, Any]:
        """Fetch ``notion_user`` records via ``getRecordValues``."""
        body = {"requests": record_requests("notion_user", user_ids)}
        return self._transport.post_json(GET_RECORD_VALUES, body)
