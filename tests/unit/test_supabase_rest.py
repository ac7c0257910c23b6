"""
Tests for the PostgREST client, driven through httpx.MockTransport.
"""

import json
from datetime import UTC, datetime

import httpx
import pytest

from budget_dashboard.config import ConfigurationError
from budget_dashboard.db import supabase_rest
from budget_dashboard.db.supabase_rest import (
    StoreError,
    SupabaseRestClient,
    eq,
    gte,
    is_,
    lt,
    parse_content_range,
)
from tests.fakes import CappedRestTable

BASE_URL = "https://abcd1234.supabase.co"


def _client(handler) -> SupabaseRestClient:
    return SupabaseRestClient(BASE_URL, "service-key", transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    "header,expected",
    [("0-24/42", 42), ("*/0", 0), ("*/7", 7), ("0-24/*", None), (None, None), ("", None)],
)
def test_parse_content_range(header, expected):
    assert parse_content_range(header) == expected


def test_parse_content_range_rejects_garbage():
    with pytest.raises(StoreError):
        parse_content_range("0-24/lots")


def test_filter_renders_datetimes_and_booleans():
    ts = datetime(2026, 10, 12, 12, 0, tzinfo=UTC)

    assert gte("contacted_at", ts).as_param() == ("contacted_at", f"gte.{ts.isoformat()}")
    assert eq("completed", True).as_param() == ("completed", "eq.true")
    assert is_("district", None).as_param() == ("district", "is.null")


def test_eq_refuses_null():
    with pytest.raises(ValueError):
        eq("district", None)


@pytest.mark.asyncio
async def test_count_sends_head_with_exact_count():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, headers={"Content-Range": "*/42"})

    client = _client(handler)
    since = datetime(2026, 10, 5, tzinfo=UTC)
    until = datetime(2026, 10, 12, tzinfo=UTC)

    total = await client.count(
        "congress_contacts", [gte("contacted_at", since), lt("contacted_at", until)]
    )
    await client.close()

    request = seen["request"]
    assert total == 42
    assert request.method == "HEAD"
    assert request.url.path == "/rest/v1/congress_contacts"
    assert request.headers["Prefer"] == "count=exact"
    assert request.headers["apikey"] == "service-key"
    assert request.headers["Authorization"] == "Bearer service-key"
    assert request.url.params.get_list("contacted_at") == [
        f"gte.{since.isoformat()}",
        f"lt.{until.isoformat()}",
    ]


@pytest.mark.asyncio
async def test_select_returns_rows_and_passes_options():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = request.url.params
        return httpx.Response(200, json=[{"zip_code": "94103"}])

    client = _client(handler)
    rows = await client.select("congress_contacts", "zip_code", order="contacted_at.desc", limit=5)
    await client.close()

    assert rows == [{"zip_code": "94103"}]
    assert seen["params"]["select"] == "zip_code"
    assert seen["params"]["order"] == "contacted_at.desc"
    assert seen["params"]["limit"] == "5"


@pytest.mark.asyncio
async def test_select_rejects_non_list_body():
    client = _client(lambda request: httpx.Response(200, json={"zip_code": "94103"}))

    with pytest.raises(StoreError):
        await client.select("congress_contacts")
    await client.close()


@pytest.mark.asyncio
async def test_select_all_pages_past_the_max_rows_cap():
    table = CappedRestTable([{"id": i} for i in range(1500)], max_rows=1000)
    client = _client(table)

    rows = await client.select_all("congress_contacts", "id", order="id.asc")
    await client.close()

    assert [row["id"] for row in rows] == list(range(1500))
    assert len(table.requests) == 2
    first, second = table.requests
    assert first.headers["prefer"] == "count=exact"
    assert "offset" not in first.url.params
    assert "prefer" not in second.headers
    assert second.url.params["offset"] == "1000"
    assert second.url.params["order"] == "id.asc"


@pytest.mark.asyncio
async def test_select_all_handles_a_cap_below_the_page_size():
    table = CappedRestTable([{"id": i} for i in range(1500)], max_rows=400)
    client = _client(table)

    rows = await client.select_all("congress_contacts", "id", order="id.asc")
    await client.close()

    assert [row["id"] for row in rows] == list(range(1500))
    assert [r.url.params.get("offset", "0") for r in table.requests] == [
        "0",
        "400",
        "800",
        "1200",
    ]


@pytest.mark.asyncio
async def test_select_all_without_a_total_stops_on_empty_page():
    table = CappedRestTable([{"id": i} for i in range(1500)], report_count=False)
    client = _client(table)

    rows = await client.select_all("congress_contacts", "id", order="id.asc")
    await client.close()

    assert len(rows) == 1500
    assert len(table.requests) == 3


@pytest.mark.asyncio
async def test_select_all_on_empty_table_makes_one_request():
    table = CappedRestTable([])
    client = _client(table)

    rows = await client.select_all("congress_contacts")
    await client.close()

    assert rows == []
    assert len(table.requests) == 1


@pytest.mark.asyncio
async def test_error_status_raises_store_error_with_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Invalid API key"})

    client = _client(handler)

    with pytest.raises(StoreError) as exc_info:
        await client.count("congress_contacts")
    await client.close()

    assert exc_info.value.status_code == 401
    assert exc_info.value.operation == "count"
    assert "Invalid API key" in str(exc_info.value)


@pytest.mark.asyncio
async def test_transport_error_raises_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(StoreError) as exc_info:
        await client.select("congress_contacts")
    await client.close()

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_insert_with_returning_unwraps_single_row():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(201, json=[{"id": "abc"}])

    client = _client(handler)
    created = await client.insert("budget_sessions", {}, returning="id")
    await client.close()

    assert created == {"id": "abc"}
    assert seen["request"].method == "POST"
    assert seen["request"].headers["Prefer"] == "return=representation"
    assert json.loads(seen["request"].content) == {}


@pytest.mark.asyncio
async def test_insert_without_returning_is_minimal():
    client = _client(lambda request: httpx.Response(201))

    assert await client.insert("user_interactions", {"session_id": "s1"}) is None
    await client.close()


@pytest.mark.asyncio
async def test_update_sends_patch_with_filters():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(204)

    client = _client(handler)
    await client.update("budget_sessions", {"completed": True}, [eq("id", "s1")])
    await client.close()

    assert seen["request"].method == "PATCH"
    assert seen["request"].url.params["id"] == "eq.s1"
    assert json.loads(seen["request"].content) == {"completed": True}


@pytest.mark.asyncio
async def test_update_refuses_without_filters():
    client = _client(lambda request: httpx.Response(204))

    with pytest.raises(StoreError):
        await client.update("budget_sessions", {"completed": True}, [])
    await client.close()


def test_get_store_client_requires_configuration(store_unconfigured, monkeypatch):
    monkeypatch.setattr(supabase_rest, "_store_client", None)

    with pytest.raises(ConfigurationError):
        supabase_rest.get_store_client()

    assert supabase_rest._store_client is None


@pytest.mark.asyncio
async def test_get_store_client_is_shared_and_closable(store_configured, monkeypatch):
    monkeypatch.setattr(supabase_rest, "_store_client", None)

    first = supabase_rest.get_store_client()
    second = supabase_rest.get_store_client()

    assert first is second
    assert first.base_url == BASE_URL

    await supabase_rest.close_store_client()
    assert first.closed
    assert supabase_rest._store_client is None
