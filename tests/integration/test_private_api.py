"""Integration tests against the live private API.

These tests require a signed-in browser session and a page that session
can read.  Set NOTION_TOKEN_V2 (and usually NOTION_USER_ID) plus
NOTION_TEST_PAGE_ID to run them.

Usage:
    NOTION_TOKEN_V2=v02%3A... NOTION_USER_ID=... NOTION_TEST_PAGE_ID=... \
        pytest tests/integration/ -v
"""
import os

import pytest

# Read at import time: the suite's autouse fixture clears NOTION_* variables.
TOKEN_V2 = os.environ.get("NOTION_TOKEN_V2", "")
USER_ID = os.environ.get("NOTION_USER_ID", "")
PAGE_ID = os.environ.get("NOTION_TEST_PAGE_ID", "")

pytestmark = pytest.mark.skipif(
    not (TOKEN_V2 and PAGE_ID),
    reason="NOTION_TOKEN_V2 / NOTION_TEST_PAGE_ID not set; skipping integration tests",
)


@pytest.fixture
def client():
    from nocli import NocliClient

    with NocliClient(token_v2=TOKEN_V2, notion_user_id=USER_ID) as c:
        yield c


class TestPages:
    def test_fetch_page(self, client):
        response = client.fetch_page(PAGE_ID)
        assert "recordMap" in response

    def test_page_objects_include_page_block(self, client):
        from nocli import parse_page_id

        result = client.page_objects(PAGE_ID, table="block")
        assert result.counts.get("block", 0) > 0
        assert parse_page_id(PAGE_ID) in [o["id"] for o in result.objects]

    def test_page_types(self, client):
        result = client.page_types(PAGE_ID)
        assert result.seen_block_types


class TestBlocks:
    def test_get_page_block_normalized(self, client):
        block = client.get_block(PAGE_ID, notion_block_like=True)
        assert block["object"] == "block"
        assert "private_value" in block

    def test_block_children(self, client):
        result = client.block_children(PAGE_ID)
        for child in result.children:
            assert set(child) == {"id", "object"}
