"""nocli.private_api -- transport and endpoint wrappers for the private API.

This sub-package provides:

* :mod:`.transport` -- POST-JSON transport with cookie auth and typed errors.
* :mod:`.pages` -- ``loadPageChunk`` / ``loadCachedPageChunkV2``.
* :mod:`.records` -- ``syncRecordValuesMain`` / ``getRecordValues``.
* :mod:`.collections` -- ``queryCollection``.
"""

from __future__ import annotations

from .collections import CollectionAPI, build_query_payload
from .pages import PageAPI
from .records import RecordAPI, record_requests
from .transport import PrivateTransport, build_headers

__all__ = [
    "CollectionAPI",
    "PageAPI",
    "PrivateTransport",
    "RecordAPI",
    "build_headers",
    "build_query_payload",
    "record_requests",
]
