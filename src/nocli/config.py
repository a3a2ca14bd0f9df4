"""Runtime configuration for nocli.

:class:`NocliConfig` is a dataclass that captures every knob the client
and transport read.  Instances are built once per CLI invocation by
:func:`resolve_config`, which layers explicit values (flags or
environment variables) over the persisted credential file and the
built-in defaults.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

if TYPE_CHECKING:
    from nocli.credentials import CredentialFile

DEFAULT_BASE_URL = "https://www.notion.so"

DEFAULT_USER_TIME_ZONE = "America/Los_Angeles"

_SECRET_FIELDS = frozenset({"token_v2", "cookie"})


@dataclass
class NocliConfig:
    """Complete configuration for a nocli client.

    Parameters
    ----------
    base_url:
        Root URL of the web app.  Private endpoints live under
        ``/api/v3``.  A trailing slash is stripped.
    token_v2:
        Value of the ``token_v2`` session cookie.  Never logged.
    notion_user_id:
        Value of the ``notion_user_id`` cookie.
    active_user_id:
        Sent as ``x-notion-active-user-header`` when set.
    cookie:
        Raw ``Cookie`` header.  Takes precedence over ``token_v2`` and
        ``notion_user_id`` when non-empty.  Never logged.
    timeout_seconds:
        Overall timeout for each HTTP request.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    user_time_zone:
        Time zone reported to ``queryCollection``.
    metrics:
        Optional :class:`~nocli.observability.MetricsHook` backend.
    debug_dump_payload:
        Write the (redacted) request and response of every call to
        *stderr*.
    """

    # ── Endpoint & auth ────────────────────────────────────────────────
    base_url: str = DEFAULT_BASE_URL

    token_v2: str = ""

    notion_user_id: str = ""

    active_user_id: str = ""

    cookie: str = ""

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Queries ─────────────────────────────────────────────────────────
    user_time_zone: str = DEFAULT_USER_TIME_ZONE

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Normalise string fields and validate after initialization."""
        self.base_url = (self.base_url or "").strip().rstrip("/") or DEFAULT_BASE_URL
        self.token_v2 = (self.token_v2 or "").strip()
        self.notion_user_id = (self.notion_user_id or "").strip()
        self.active_user_id = (self.active_user_id or "").strip()
        self.cookie = (self.cookie or "").strip()

        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your session cookie, or target localhost for testing."
            )
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    @property
    def cookie_header(self) -> str:
        """The ``Cookie`` header value, or ``""`` when no cookie is known."""
        if self.cookie:
            return self.cookie
        parts: list[str] = []
        if self.token_v2:
            parts.append(f"token_v2={self.token_v2}")
        if self.notion_user_id:
            parts.append(f"notion_user_id={self.notion_user_id}")
        return "; ".join(parts)

    @property
    def has_auth_material(self) -> bool:
        """True when a raw cookie, or both ``token_v2`` and ``notion_user_id``, are set."""
        return bool(self.cookie) or bool(self.token_v2 and self.notion_user_id)

    def __repr__(self) -> str:
        """Mask the session secrets to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name in _SECRET_FIELDS:
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"{f.name}='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NocliConfig({', '.join(parts)})"


def _first_non_empty(*values: str | None) -> str:
    for value in values:
        if value is not None and value.strip():
            return value.strip()
    return ""


def resolve_config(
    credentials: CredentialFile | None = None,
    *,
    base_url: str | None = None,
    token_v2: str | None = None,
    notion_user_id: str | None = None,
    active_user_id: str | None = None,
    cookie: str | None = None,
    **kwargs: Any,
) -> NocliConfig:
    """Build a :class:`NocliConfig` from explicit values and a credential file.

    For each credential field the first non-blank value wins: the explicit
    keyword argument (a CLI flag or its environment variable), then the
    credential file, then the built-in default.  Remaining *kwargs* are
    forwarded to :class:`NocliConfig` unchanged.
    """
    from nocli.credentials import CredentialFile

    creds = credentials if credentials is not None else CredentialFile()
    return NocliConfig(
        base_url=_first_non_empty(base_url, creds.base_url) or DEFAULT_BASE_URL,
        token_v2=_first_non_empty(token_v2, creds.token_v2),
        notion_user_id=_first_non_empty(notion_user_id, creds.notion_user_id),
        active_user_id=_first_non_empty(active_user_id, creds.active_user_id),
        cookie=_first_non_empty(cookie, creds.cookie),
        **kwargs,
    )
