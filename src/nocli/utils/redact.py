"""Secret redaction for debug dumps and operator-facing summaries.

Session cookies grant full account access, so nothing derived from them
may reach a log or a debug dump unmasked.  :func:`redact` applies these
rules to a JSON-like payload:

* Values under **sensitive keys** (``cookie``, ``token``, ``secret``, ...)
  are masked.
* ``token_v2=<value>`` pairs inside any string are masked, which covers
  raw ``Cookie`` headers echoed back in error bodies.
* Any occurrence of the explicitly supplied secrets is scrubbed.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable
from typing import Any

# Substrings: if any of these appear in a key name (case-insensitive), the
# value is redacted.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "cookie",
    "session",
})

_TOKEN_PAIR_RE = re.compile(r"(token_v2=)[^;\s\"']+", re.IGNORECASE)


def mask_secret(value: str) -> str:
    """Show only the first and last four characters of *value*.

    Values of eight characters or fewer are fully masked; an empty value
    stays empty.

    >>> mask_secret("v02%3Auser_token%3Aabcdef")
    'v02%...cdef'
    """
    if not value:
        return ""
    if len(value) <= 8:
        return "********"
    return f"{value[:4]}...{value[-4:]}"


def _scrub(value: str, secrets: tuple[str, ...]) -> str:
    for secret in secrets:
        if secret and secret in value:
            value = value.replace(secret, "<redacted>")
    return _TOKEN_PAIR_RE.sub(lambda m: f"{m.group(1)}<redacted>", value)


def _redact_value(value: Any, secrets: tuple[str, ...]) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, secrets)
    if isinstance(value, list):
        return [_redact_value(item, secrets) for item in value]
    if isinstance(value, str):
        return _scrub(value, secrets)
    return value


def _redact_dict(d: dict, secrets: tuple[str, ...]) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            result[key] = mask_secret(value) if isinstance(value, str) else "<redacted>"
        else:
            result[key] = _redact_value(value, secrets)
    return result


def redact(payload: dict, secrets: Iterable[str | None] = ()) -> dict:
    """Return a deep copy of *payload* with session secrets removed.

    Parameters
    ----------
    payload:
        The dictionary to sanitise (request body, headers, response body).
    secrets:
        Exact secret strings (token, raw cookie) to scrub wherever they
        appear.  Blank entries are ignored.

    Returns
    -------
    dict
        A new dictionary; *payload* is never mutated.

    Examples
    --------
    >>> redact({"Cookie": "token_v2=abcdefghijkl; notion_user_id=u"})
    {'Cookie': 'toke...id=u'}
    """
    safe = copy.deepcopy(payload)
    cleaned = tuple(s for s in secrets if s)
    return _redact_dict(safe, cleaned)
