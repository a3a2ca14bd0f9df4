"""nocli: command-line client for the Notion web app's private API.

Public re-exports
-----------------

* **Client:** :class:`NocliClient`
* **Configuration:** :class:`NocliConfig`, :func:`resolve_config`
* **Errors:** Every :class:`NocliError` subclass and :class:`ErrorCode`
* **Models:** All result dataclasses and the :class:`FetchEndpoint` enum
* **Record maps:** :func:`flatten_record_map`, :func:`normalize_block_object`
* **IDs:** :func:`parse_page_id`

Usage::

    from nocli import NocliClient

    with NocliClient(token_v2="...", notion_user_id="...") as client:
        page = client.fetch_page("https://www.notion.so/My-Page-<32 hex>")
"""

from __future__ import annotations

from nocli._version import __version__

# ── Client ─────────────────────────────────────────────────────────────
from nocli.client import NocliClient

# ── Configuration ───────────────────────────────────────────────────────
from nocli.config import DEFAULT_BASE_URL, NocliConfig, resolve_config

# ── Errors ──────────────────────────────────────────────────────────────
from nocli.errors import (
    ErrorCode,
    NocliAuthError,
    NocliConfigError,
    NocliDecodeError,
    NocliError,
    NocliInputError,
    NocliInvalidIdError,
    NocliNetworkError,
    NocliNotFoundError,
    NocliPermissionError,
    NocliRecordNotFoundError,
    NocliStatusError,
)

# ── Models ──────────────────────────────────────────────────────────────
from nocli.models import (
    BlockChildrenResult,
    CollectionQueryResult,
    FetchEndpoint,
    PageObjectsResult,
    PageTypesResult,
    RecordEntry,
)

# ── Record maps & IDs ───────────────────────────────────────────────────
from nocli.recordmap import flatten_record_map, normalize_block_object
from nocli.utils.ids import parse_page_id

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    "__version__",
    # Client
    "NocliClient",
    # Configuration
    "NocliConfig",
    "DEFAULT_BASE_URL",
    "resolve_config",
    # Error base + code enum
    "NocliError",
    "ErrorCode",
    # Input / config errors
    "NocliInputError",
    "NocliInvalidIdError",
    "NocliConfigError",
    # Transport errors
    "NocliNetworkError",
    "NocliStatusError",
    "NocliAuthError",
    "NocliPermissionError",
    "NocliNotFoundError",
    "NocliDecodeError",
    # Command errors
    "NocliRecordNotFoundError",
    # Models
    "FetchEndpoint",
    "RecordEntry",
    "PageObjectsResult",
    "PageTypesResult",
    "BlockChildrenResult",
    "CollectionQueryResult",
    # Record maps & IDs
    "flatten_record_map",
    "normalize_block_object",
    "parse_page_id",
]
