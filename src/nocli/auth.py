"""Import session credentials from a pasted browser request.

The usual setup is: open the web app, pick any ``/api/v3/...`` request in
the network inspector, choose *Copy as cURL*, and pipe the clipboard into
``nocli auth import-curl``.  :func:`parse_curl_auth` pulls the session
values out of that text and :func:`import_curl_auth` merges them into the
credential file.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from nocli.config import DEFAULT_BASE_URL
from nocli.credentials import read_credentials, write_credentials
from nocli.errors import NocliInputError
from nocli.observability import get_logger

log = get_logger("nocli.auth")

_COOKIE_HEADER_RE = re.compile(r"cookie\s*:\s*([^\r\n\"']+)", re.IGNORECASE | re.MULTILINE)
_COOKIE_FLAG_RE = re.compile(r"(?:^|\s)(?:-b|--cookie)\s+(['\"])(.+?)\1", re.MULTILINE)
_TOKEN_V2_RE = re.compile(r"token_v2=([^;\s\"']+)", re.IGNORECASE)
_USER_ID_RE = re.compile(r"notion_user_id=([0-9a-f\-]{32,36})", re.IGNORECASE)
_ACTIVE_USER_RE = re.compile(
    r"x-notion-active-user-header\s*:\s*([0-9a-f\-]{32,36})",
    re.IGNORECASE | re.MULTILINE,
)
_BASE_URL_RE = re.compile(re.escape(DEFAULT_BASE_URL))


@dataclass
class CurlAuth:
    """Session values found in a pasted request.  Empty strings mean absent."""

    token_v2: str = ""
    notion_user_id: str = ""
    active_user_id: str = ""
    cookie: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.token_v2 or self.notion_user_id or self.active_user_id or self.cookie)


@dataclass
class ImportSummary:
    """What :func:`import_curl_auth` stored, for reporting to the operator."""

    path: Path
    token_v2: str = ""
    notion_user_id: str = ""
    active_user_id: str = ""
    cookie_stored: bool = False

    @property
    def is_complete(self) -> bool:
        return bool(self.token_v2 and self.notion_user_id)


def parse_cookie_value(cookie_header: str, key: str) -> str:
    """Return the value of *key* in a ``Cookie`` header, or ``""``."""
    for part in cookie_header.split(";"):
        name, sep, value = part.partition("=")
        name = name.strip()
        if sep and name and name == key:
            return value.strip()
    return ""


def parse_curl_auth(raw: str) -> CurlAuth:
    """Extract session values from a *Copy as cURL* paste (or raw headers).

    The ``Cookie`` header (or curl's ``-b``/``--cookie`` argument) is read
    first; ``token_v2`` and ``notion_user_id`` fall back to a search of
    the whole text when the header lacks them.
    """
    auth = CurlAuth()

    match = _COOKIE_HEADER_RE.search(raw)
    if match is not None:
        auth.cookie = match.group(1).strip()
    else:
        flag = _COOKIE_FLAG_RE.search(raw)
        if flag is not None:
            auth.cookie = flag.group(2).strip()

    if auth.cookie:
        auth.token_v2 = parse_cookie_value(auth.cookie, "token_v2")
        auth.notion_user_id = parse_cookie_value(auth.cookie, "notion_user_id")

    if not auth.token_v2:
        match = _TOKEN_V2_RE.search(raw)
        if match is not None:
            auth.token_v2 = match.group(1).strip()
    if not auth.notion_user_id:
        match = _USER_ID_RE.search(raw)
        if match is not None:
            auth.notion_user_id = match.group(1).strip()
    match = _ACTIVE_USER_RE.search(raw)
    if match is not None:
        auth.active_user_id = match.group(1).strip()

    return auth


def import_curl_auth(
    raw: str,
    path: str | os.PathLike[str] | None = None,
    *,
    store_cookie: bool = False,
) -> ImportSummary:
    """Merge the session values in *raw* into the credential file at *path*.

    Only values found in *raw* overwrite stored ones.  The raw cookie is
    stored only when *store_cookie* is set.

    Raises
    ------
    NocliInputError
        If *raw* is blank or holds no recognisable session values.
    NocliConfigError
        If the credential file cannot be read or written.
    """
    if not raw.strip():
        raise NocliInputError("empty input", context={"source": "import-curl"})

    auth = parse_curl_auth(raw)
    if auth.is_empty:
        raise NocliInputError(
            "no notion auth values found; paste a full 'Copy as cURL' request including headers",
            context={"source": "import-curl"},
        )

    creds = read_credentials(path)
    if auth.token_v2:
        creds.token_v2 = auth.token_v2
    if auth.notion_user_id:
        creds.notion_user_id = auth.notion_user_id
    if auth.active_user_id:
        creds.active_user_id = auth.active_user_id
    cookie_stored = store_cookie and bool(auth.cookie)
    if cookie_stored:
        creds.cookie = auth.cookie
    if not creds.base_url and _BASE_URL_RE.search(raw):
        creds.base_url = DEFAULT_BASE_URL

    written = write_credentials(path, creds)
    log.info(
        "Imported session credentials",
        extra={
            "extra_fields": {
                "op": "import_curl_auth",
                "path": str(written),
                "token_v2": bool(auth.token_v2),
                "notion_user_id": bool(auth.notion_user_id),
                "cookie_stored": cookie_stored,
            }
        },
    )
    return ImportSummary(
        path=written,
        token_v2=auth.token_v2,
        notion_user_id=auth.notion_user_id,
        active_user_id=auth.active_user_id,
        cookie_stored=cookie_stored,
    )
