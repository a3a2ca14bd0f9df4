"""Shared test fixtures for the nocli test suite."""

from __future__ import annotations

import logging

import pytest

from nocli.config import NocliConfig
from nocli.observability import configure_logging

_NOTION_ENV_VARS = (
    "NOTION_CONFIG",
    "NOTION_BASE_URL",
    "NOTION_TOKEN_V2",
    "NOTION_USER_ID",
    "NOTION_ACTIVE_USER_ID",
    "NOTION_COOKIE",
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point ``~`` at a temp dir and clear NOTION_* variables for every test.

    Keeps a developer's real ``~/.nocli.json`` and session out of the suite.
    The integration module reads its variables at import time, so clearing
    them here does not disable it.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in _NOTION_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def config() -> NocliConfig:
    """Default test configuration with dummy session values."""
    return NocliConfig(
        token_v2="test_token_v2_secret_1234",
        notion_user_id="11111111-2222-3333-4444-555555555555",
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Re-bind the ``nocli`` log handler around each test.

    CLI tests point the handler at ``CliRunner``'s temporary streams.
    """
    configure_logging(logging.WARNING)
    yield
    configure_logging(logging.WARNING)
