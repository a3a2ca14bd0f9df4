"""Persisted credential file.

The file is a small JSON object holding the session values harvested
from a browser::

    {
      "base_url": "https://www.notion.so",
      "token_v2": "...",
      "notion_user_id": "...",
      "active_user_id": "...",
      "cookie": "..."
    }

Every field is optional.  Writes are atomic (temp file then rename) and
the file is kept at mode ``0600``.  When the default path does not exist
the legacy ``~/.notion.json`` is read instead.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from nocli.errors import NocliConfigError
from nocli.observability import get_logger

log = get_logger("nocli.credentials")

DEFAULT_FILENAME = ".nocli.json"
LEGACY_FILENAME = ".notion.json"


@dataclass
class CredentialFile:
    """In-memory form of the credential file.  Empty strings mean unset."""

    base_url: str = ""
    token_v2: str = ""
    notion_user_id: str = ""
    active_user_id: str = ""
    cookie: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> CredentialFile:
        """Build from decoded JSON, ignoring unknown and non-string fields."""
        if not isinstance(data, dict):
            return cls()
        values: dict[str, str] = {}
        for f in fields(cls):
            raw = data.get(f.name)
            if isinstance(raw, str):
                values[f.name] = raw
        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        """Return the non-empty fields, in declaration order."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name)}


def _home() -> Path | None:
    try:
        home = Path.home()
    except RuntimeError:
        return None
    return home if str(home).strip() else None


def default_path() -> Path:
    """``~/.nocli.json``, or ``.nocli.json`` when no home directory is known."""
    home = _home()
    return home / DEFAULT_FILENAME if home is not None else Path(DEFAULT_FILENAME)


def legacy_path() -> Path:
    """``~/.notion.json``, or ``.notion.json`` when no home directory is known."""
    home = _home()
    return home / LEGACY_FILENAME if home is not None else Path(LEGACY_FILENAME)


def resolve_path(path: str | os.PathLike[str] | None = None) -> Path:
    """Expand ``~`` in an explicit path, or return :func:`default_path`."""
    text = str(path).strip() if path is not None else ""
    if not text:
        return default_path()
    return Path(text).expanduser()


def _decode(raw: bytes, path: Path) -> CredentialFile:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise NocliConfigError(
            f"parse config {path}: {exc}",
            context={"path": str(path)},
            cause=exc,
        ) from exc
    return CredentialFile.from_dict(data)


def read_credentials(path: str | os.PathLike[str] | None = None) -> CredentialFile:
    """Read the credential file at *path*.

    A missing file yields empty credentials.  If *path* is the default
    location and it does not exist, the legacy location is tried; a
    legacy file that cannot be read or parsed is ignored.

    Raises
    ------
    NocliConfigError
        If the file exists but cannot be read or is not valid JSON.
    """
    p = resolve_path(path)
    try:
        raw = p.read_bytes()
    except FileNotFoundError:
        if p == default_path():
            legacy = legacy_path()
            try:
                creds = _decode(legacy.read_bytes(), legacy)
            except (OSError, NocliConfigError):
                return CredentialFile()
            log.debug(
                "Using legacy credential file",
                extra={"extra_fields": {"op": "read_credentials", "path": str(legacy)}},
            )
            return creds
        return CredentialFile()
    except OSError as exc:
        raise NocliConfigError(
            f"read config {p}: {exc}",
            context={"path": str(p)},
            cause=exc,
        ) from exc
    return _decode(raw, p)


def write_credentials(
    path: str | os.PathLike[str] | None,
    credentials: CredentialFile,
) -> Path:
    """Atomically write *credentials* to *path* with mode ``0600``.

    Returns the resolved path that was written.

    Raises
    ------
    NocliConfigError
        If the directory, temp file, rename or chmod fails.
    """
    p = resolve_path(path)
    body = json.dumps(credentials.to_dict(), indent=2) + "\n"

    try:
        if p.parent != Path("."):
            p.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as exc:
        raise NocliConfigError(
            f"create config dir: {exc}", context={"path": str(p)}, cause=exc
        ) from exc

    tmp = p.with_name(p.name + ".tmp")
    try:
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(body)
    except OSError as exc:
        raise NocliConfigError(
            f"write temp config: {exc}", context={"path": str(tmp)}, cause=exc
        ) from exc

    try:
        os.replace(tmp, p)
        os.chmod(p, 0o600)
    except OSError as exc:
        raise NocliConfigError(
            f"commit config: {exc}", context={"path": str(p)}, cause=exc
        ) from exc

    log.debug(
        "Credential file written",
        extra={"extra_fields": {"op": "write_credentials", "path": str(p)}},
    )
    return p
