"""Tests for NocliClient, run against an httpx.MockTransport."""

from __future__ import annotations

import io
import json

import httpx
import pytest

from nocli.client import NocliClient
from nocli.config import NocliConfig
from nocli.errors import (
    NocliAuthError,
    NocliInvalidIdError,
    NocliRecordNotFoundError,
    NocliStatusError,
)
from nocli.models import BlockChildrenResult, CollectionQueryResult, FetchEndpoint
from nocli.observability import configure_logging

PAGE_URL = "https://www.notion.so/My-Page-1234567890abcdef1234567890abcdef"
PAGE_ID = "12345678-90ab-cdef-1234-567890abcdef"
CHILD_A = "aaaaaaaa-0000-0000-0000-000000000001"
CHILD_B = "aaaaaaaa-0000-0000-0000-000000000002"
CHILD_C = "aaaaaaaa-0000-0000-0000-000000000003"
USER_ID = "11111111-2222-3333-4444-555555555555"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def wrap(record: dict) -> dict:
    return {"value": {"value": record, "role": "editor"}}


def envelope(**tables: dict) -> dict:
    return {
        "recordMap": {
            "__version__": 3,
            **{name: {rid: wrap(rec) for rid, rec in rows.items()} for name, rows in tables.items()},
        }
    }


PAGE_RESPONSE = envelope(
    block={
        PAGE_ID: {"id": PAGE_ID, "type": "page", "alive": True, "content": [CHILD_A, CHILD_B]},
        CHILD_A: {"id": CHILD_A, "type": "Text", "parent_id": PAGE_ID, "parent_table": "block"},
        CHILD_B: {"id": CHILD_B, "type": "header", "parent_id": PAGE_ID, "parent_table": "block"},
        CHILD_C: {"id": CHILD_C, "type": " paragraph ", "parent_id": PAGE_ID, "parent_table": "block"},
    },
    notion_user={USER_ID: {"id": USER_ID, "name": "Ada"}},
    space={"space-1": {"id": "space-1"}},
)


class Router:
    """Record every request and answer by endpoint path."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.routes[request.url.path]
        if callable(answer):
            answer = answer(json.loads(request.content))
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    def bodies(self, path: str) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.url.path == path]


def make_client(router: Router, **cfg) -> NocliClient:
    config = NocliConfig(token_v2="tok", notion_user_id=USER_ID, **cfg)
    return NocliClient(config, http_transport=httpx.MockTransport(router))


def sync_blocks(store: dict):
    """syncRecordValuesMain handler answering from *store* by requested IDs."""

    def answer(body: dict) -> dict:
        ids = [req["id"] for req in body["requests"]]
        return envelope(block={rid: store[rid] for rid in ids if rid in store})

    return answer


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_kwargs_build_config(self):
        with NocliClient(token_v2="tok", timeout_seconds=5) as client:
            assert client.config.token_v2 == "tok"
            assert client.config.timeout_seconds == 5

    def test_config_and_kwargs_rejected(self):
        with pytest.raises(TypeError):
            NocliClient(NocliConfig(), token_v2="tok")

    def test_close_closes_transport(self):
        client = NocliClient()
        client.close()
        assert client._transport._client.is_closed


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

class TestFetchPage:
    def test_auto_uses_load_page_chunk(self):
        router = Router({"/api/v3/loadPageChunk": PAGE_RESPONSE})
        with make_client(router) as client:
            assert client.fetch_page(PAGE_URL) == PAGE_RESPONSE
        assert router.bodies("/api/v3/loadPageChunk")[0]["pageId"] == PAGE_ID

    def test_auto_falls_back_on_error(self):
        buf = io.StringIO()
        configure_logging("WARNING", stream=buf)
        router = Router({
            "/api/v3/loadPageChunk": httpx.Response(400, json={"name": "ValidationError"}),
            "/api/v3/loadCachedPageChunkV2": PAGE_RESPONSE,
        })
        with make_client(router) as client:
            assert client.fetch_page(PAGE_ID) == PAGE_RESPONSE
        assert [r.url.path for r in router.requests] == [
            "/api/v3/loadPageChunk",
            "/api/v3/loadCachedPageChunkV2",
        ]
        assert router.bodies("/api/v3/loadCachedPageChunkV2")[0]["page"] == {"id": PAGE_ID}
        events = [json.loads(line) for line in buf.getvalue().splitlines()]
        fallback = [e for e in events if e.get("op") == "load_page"]
        assert fallback and fallback[0]["level"] == "WARNING"

    def test_auto_fallback_error_propagates(self):
        router = Router({
            "/api/v3/loadPageChunk": httpx.Response(500, text="boom"),
            "/api/v3/loadCachedPageChunkV2": httpx.Response(401, text="nope"),
        })
        with make_client(router) as client, pytest.raises(NocliAuthError):
            client.fetch_page(PAGE_ID)

    def test_explicit_endpoint_has_no_fallback(self):
        router = Router({"/api/v3/loadPageChunk": httpx.Response(500, text="boom")})
        with make_client(router) as client, pytest.raises(NocliStatusError):
            client.fetch_page(PAGE_ID, FetchEndpoint.LOAD_PAGE_CHUNK)
        assert len(router.requests) == 1

    def test_explicit_cached_endpoint_by_name(self):
        router = Router({"/api/v3/loadCachedPageChunkV2": PAGE_RESPONSE})
        with make_client(router) as client:
            client.fetch_page(PAGE_ID, "loadCachedPageChunkV2")
        assert [r.url.path for r in router.requests] == ["/api/v3/loadCachedPageChunkV2"]

    def test_unknown_endpoint_rejected(self):
        with make_client(Router({})) as client, pytest.raises(ValueError):
            client.fetch_page(PAGE_ID, "loadEverything")

    def test_invalid_id_makes_no_request(self):
        router = Router({})
        with make_client(router) as client, pytest.raises(NocliInvalidIdError):
            client.fetch_page("not a page")
        assert router.requests == []


class TestPageObjects:
    def _client(self) -> NocliClient:
        return make_client(Router({"/api/v3/loadPageChunk": PAGE_RESPONSE}))

    def test_all_tables_sorted(self):
        with self._client() as client:
            result = client.page_objects(PAGE_URL)
        assert result.page_id == PAGE_ID
        assert result.counts == {"block": 4, "notion_user": 1, "space": 1}
        keys = [(o["table"], o["id"]) for o in result.objects]
        assert keys == [
            ("block", PAGE_ID),
            ("block", CHILD_A),
            ("block", CHILD_B),
            ("block", CHILD_C),
            ("notion_user", USER_ID),
            ("space", "space-1"),
        ]
        assert result.objects[4]["object"] == {"id": USER_ID, "name": "Ada"}

    def test_table_filter(self):
        with self._client() as client:
            result = client.page_objects(PAGE_ID, table=" notion_user ")
        assert [o["table"] for o in result.objects] == ["notion_user"]
        assert result.counts["block"] == 4
        assert result.filters == {"table": "notion_user", "block_type": "", "notion_block_like": False}

    def test_block_type_filter_case_insensitive(self):
        with self._client() as client:
            result = client.page_objects(PAGE_ID, block_type="TEXT")
        ids = [o["id"] for o in result.objects]
        assert CHILD_A in ids
        assert PAGE_ID not in ids
        assert ("notion_user", USER_ID) in [(o["table"], o["id"]) for o in result.objects]
        assert result.filters["block_type"] == "text"

    def test_notion_block_like(self):
        with self._client() as client:
            result = client.page_objects(PAGE_ID, table="block", notion_block_like=True)
        page = next(o for o in result.objects if o.get("id") == PAGE_ID)
        assert page["object"] == "block"
        assert page["table"] == "block"
        assert page["has_children"] is True
        assert page["archived"] is False
        assert page["private_value"]["content"] == [CHILD_A, CHILD_B]

    def test_to_dict_shape(self):
        with self._client() as client:
            data = client.page_objects(PAGE_ID, table="space").to_dict()
        assert set(data) == {"page_id", "counts", "objects", "meta"}
        assert data["meta"]["filters"]["table"] == "space"

    def test_empty_record_map(self):
        with make_client(Router({"/api/v3/loadPageChunk": {"recordMap": {}}})) as client:
            result = client.page_objects(PAGE_ID)
        assert result.counts == {}
        assert result.objects == []


class TestPageTypes:
    def test_types_counted_and_diffed(self):
        with make_client(Router({"/api/v3/loadPageChunk": PAGE_RESPONSE})) as client:
            result = client.page_types(PAGE_ID)
        assert result.seen_block_types == {"page": 1, "text": 1, "header": 1, "paragraph": 1}
        assert result.not_in_public_api_type_list == ["header", "page", "text"]
        assert "paragraph" in result.public_api_documented_types

    def test_blank_and_missing_types_ignored(self):
        response = envelope(block={"a": {"id": "a", "type": "  "}, "b": {"id": "b"}, "c": {"type": 3}})
        with make_client(Router({"/api/v3/loadPageChunk": response})) as client:
            result = client.page_types(PAGE_ID)
        assert result.seen_block_types == {}
        assert result.not_in_public_api_type_list == []


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

BLOCKS = {
    PAGE_ID: {"id": PAGE_ID, "type": "page", "alive": True, "content": [CHILD_B, "missing-id", CHILD_A]},
    CHILD_A: {"id": CHILD_A, "type": "text", "alive": True},
    CHILD_B: {"id": CHILD_B, "type": "header", "alive": False},
}


class TestGetBlock:
    def test_raw_block(self):
        router = Router({"/api/v3/syncRecordValuesMain": sync_blocks(BLOCKS)})
        with make_client(router) as client:
            result = client.get_block(CHILD_A.replace("-", ""))
        assert result == {"id": CHILD_A, "object": BLOCKS[CHILD_A]}
        assert router.bodies("/api/v3/syncRecordValuesMain") == [
            {"requests": [{"table": "block", "id": CHILD_A, "version": -1}]}
        ]

    def test_notion_block_like(self):
        router = Router({"/api/v3/syncRecordValuesMain": sync_blocks(BLOCKS)})
        with make_client(router) as client:
            result = client.get_block(CHILD_B, notion_block_like=True)
        assert result["object"] == "block"
        assert result["archived"] is True
        assert "table" not in result

    def test_falls_back_to_lowest_id_block(self):
        response = envelope(block={"zzz": {"id": "zzz"}, "mmm": {"id": "mmm"}})
        router = Router({"/api/v3/syncRecordValuesMain": response})
        with make_client(router) as client:
            result = client.get_block(CHILD_A)
        assert result == {"id": CHILD_A, "object": {"id": "mmm"}}

    def test_no_block_raises(self):
        router = Router({"/api/v3/syncRecordValuesMain": {"recordMap": {}}})
        with make_client(router) as client, pytest.raises(NocliRecordNotFoundError) as exc_info:
            client.get_block(CHILD_A)
        assert exc_info.value.context == {"table": "block", "record_id": CHILD_A}


class TestBlockChildren:
    def test_children_in_content_order_missing_skipped(self):
        router = Router({"/api/v3/syncRecordValuesMain": sync_blocks(BLOCKS)})
        with make_client(router) as client:
            result = client.block_children(PAGE_URL)
        assert isinstance(result, BlockChildrenResult)
        assert result.parent_id == PAGE_ID
        assert [c["id"] for c in result.children] == [CHILD_B, CHILD_A]
        bodies = router.bodies("/api/v3/syncRecordValuesMain")
        assert len(bodies) == 2
        assert [r["id"] for r in bodies[1]["requests"]] == [CHILD_B, "missing-id", CHILD_A]

    def test_notion_block_like_children(self):
        router = Router({"/api/v3/syncRecordValuesMain": sync_blocks(BLOCKS)})
        with make_client(router) as client:
            result = client.block_children(PAGE_ID, notion_block_like=True)
        assert [c["type"] for c in result.children] == ["header", "text"]
        assert all(c["object"] == "block" for c in result.children)

    def test_no_children_skips_second_call(self):
        router = Router({"/api/v3/syncRecordValuesMain": sync_blocks(BLOCKS)})
        with make_client(router) as client:
            result = client.block_children(CHILD_A)
        assert result.to_dict() == {"parent_id": CHILD_A, "children": []}
        assert len(router.requests) == 1

    def test_missing_parent_raises(self):
        router = Router({"/api/v3/syncRecordValuesMain": sync_blocks({})})
        with make_client(router) as client, pytest.raises(NocliRecordNotFoundError):
            client.block_children(PAGE_ID)


# ---------------------------------------------------------------------------
# Collections & users
# ---------------------------------------------------------------------------

COLLECTION_ID = "c0000000-0000-0000-0000-000000000001"
VIEW_ID = "d0000000-0000-0000-0000-000000000002"
QUERY_RESPONSE = {
    "result": {"reducerResults": {"collection_group_results": {"blockIds": ["r2", "r1"]}}},
    **envelope(block={"r2": {"id": "r2"}, "r1": {"id": "r1"}}, collection={COLLECTION_ID: {"id": COLLECTION_ID}}),
}


class TestQueryCollection:
    def test_raw_response(self):
        router = Router({"/api/v3/queryCollection": QUERY_RESPONSE})
        with make_client(router) as client:
            result = client.query_collection(COLLECTION_ID.replace("-", ""), VIEW_ID)
        assert result == QUERY_RESPONSE
        request = router.requests[0]
        assert request.url.params["src"] == "initial_load"
        body = json.loads(request.content)
        assert body["collection"] == {"id": COLLECTION_ID}
        assert body["collectionView"] == {"id": VIEW_ID}
        assert body["loader"]["reducers"]["collection_group_results"]["limit"] == 500

    def test_flattened(self):
        router = Router({"/api/v3/queryCollection": QUERY_RESPONSE})
        with make_client(router) as client:
            result = client.query_collection(COLLECTION_ID, VIEW_ID, limit=10, flatten=True)
        assert isinstance(result, CollectionQueryResult)
        assert result.counts == {"block": 2, "collection": 1}
        assert [(o["table"], o["id"]) for o in result.objects] == [
            ("block", "r1"),
            ("block", "r2"),
            ("collection", COLLECTION_ID),
        ]
        assert router.bodies("/api/v3/queryCollection")[0]["loader"]["reducers"][
            "collection_group_results"
        ]["limit"] == 10

    def test_time_zone_from_config(self):
        router = Router({"/api/v3/queryCollection": QUERY_RESPONSE})
        with make_client(router, user_time_zone="Asia/Tokyo") as client:
            client.query_collection(COLLECTION_ID, VIEW_ID)
        assert router.bodies("/api/v3/queryCollection")[0]["loader"]["userTimeZone"] == "Asia/Tokyo"

    def test_invalid_view_id(self):
        with make_client(Router({})) as client, pytest.raises(NocliInvalidIdError):
            client.query_collection(COLLECTION_ID, "view")


class TestGetUsers:
    def test_returns_user_table(self):
        response = envelope(notion_user={USER_ID: {"id": USER_ID, "email": "ada@example.com"}})
        router = Router({"/api/v3/getRecordValues": response})
        with make_client(router) as client:
            users = client.get_users([USER_ID.replace("-", "")])
        assert users == {USER_ID: {"id": USER_ID, "email": "ada@example.com"}}
        assert router.bodies("/api/v3/getRecordValues")[0] == {
            "requests": [{"table": "notion_user", "id": USER_ID, "version": -1}]
        }

    def test_no_users_in_response(self):
        with make_client(Router({"/api/v3/getRecordValues": {"recordMap": {}}})) as client:
            assert client.get_users([USER_ID]) == {}
