"""JSON output helpers shared by every command."""

from __future__ import annotations

import json
import os
import sys
from typing import IO, Any

from nocli.errors import NocliConfigError


def dump_json(value: Any) -> str:
    """Serialise *value* as indented JSON with sorted keys and a trailing newline.

    Sorting makes output keyed by table name or record ID deterministic.
    """
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False, default=str) + "\n"


def write_json(value: Any, path: str | None = None, stream: IO[str] | None = None) -> None:
    """Write *value* to *path* (mode ``0600``) or to *stream* (default stdout).

    Raises
    ------
    NocliConfigError
        If the output file cannot be written.
    """
    body = dump_json(value)
    if path:
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(body)
        except OSError as exc:
            raise NocliConfigError(
                f"write output file: {exc}", context={"path": path}, cause=exc
            ) from exc
        return
    out = stream if stream is not None else sys.stdout
    out.write(body)
    out.flush()
