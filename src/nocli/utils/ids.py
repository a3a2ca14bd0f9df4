"""Page / block ID extraction.

Record IDs are UUIDs, but operators paste them in many forms: share URLs
with a slugged title, compact 32-hex strings, or hyphenated UUIDs.
"""

from __future__ import annotations

import re

from nocli.errors import NocliInvalidIdError

# A hyphenated UUID or a bare 32-hex run, not touching other hex digits.
_DELIMITED_ID_RE = re.compile(
    r"(?<![0-9a-f])"
    r"(?:[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}|[0-9a-f]{32})"
    r"(?![0-9a-f])",
    re.IGNORECASE,
)
_HEX_RUN_RE = re.compile(r"[0-9a-f]{32,}", re.IGNORECASE)


def format_uuid(compact: str) -> str:
    """Insert hyphens into a 32-character hex string (``8-4-4-4-12``).

    Strings of any other length are returned unchanged.
    """
    if len(compact) != 32:
        return compact
    return "-".join(
        (compact[0:8], compact[8:12], compact[12:16], compact[16:20], compact[20:32])
    )


def parse_page_id(value: str) -> str:
    """Extract a canonical record ID from a URL or ID string.

    The first hyphenated UUID or standalone 32-hex run in the input wins.
    Otherwise ``-`` and ``_`` are removed and the last 32 digits of the
    last hex run of 32 or more are used, so a title slug glued to the ID
    (``Page1234...``) does not leak into it.

    Examples
    --------
    >>> parse_page_id("https://www.example.com/My-Page-1234567890abcdef1234567890abcdef")
    '12345678-90ab-cdef-1234-567890abcdef'

    Raises
    ------
    NocliInvalidIdError
        If the input is blank or contains no 32-hex run.
    """
    text = (value or "").strip()
    if not text:
        raise NocliInvalidIdError("page URL/ID is empty", context={"input": value})

    match = _DELIMITED_ID_RE.search(text)
    if match is not None:
        return format_uuid(match.group(0).replace("-", "").lower())

    runs = _HEX_RUN_RE.findall(text.replace("-", "").replace("_", ""))
    if not runs:
        raise NocliInvalidIdError(
            f"could not extract 32-char page id from input: {value!r}",
            context={"input": value},
        )
    return format_uuid(runs[-1][-32:].lower())
