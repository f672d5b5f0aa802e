"""
Unit tests for the Supabase gateway against a local aiohttp server.
"""

import json

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from caterdesk.errors import GatewayError
from caterdesk.storage.gateway import Order
from caterdesk.storage.supabase import SupabaseGateway, SupabaseStorage

pytestmark = pytest.mark.asyncio

API_KEY = "service-role-key"


class FakeSupabase:
    """Records every request and answers with canned responses."""

    def __init__(self):
        self.requests = []
        self.responses = {}

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.read()
        self.requests.append(
            {
                "method": request.method,
                "path": request.path,
                "query": dict(request.query),
                "headers": request.headers.copy(),
                "body": body,
            }
        )
        status, payload = self.responses.get((request.method, request.path), (200, []))
        if isinstance(payload, str):
            return web.Response(status=status, text=payload)
        return web.json_response(payload, status=status)

    @property
    def last(self) -> dict:
        return self.requests[-1]


@pytest_asyncio.fixture
async def backend():
    fake = FakeSupabase()
    app = web.Application()
    app.router.add_route("*", "/rest/v1/{table}", fake.handle)
    app.router.add_route("*", "/storage/v1/object/{bucket}/{key}", fake.handle)

    server = TestServer(app)
    await server.start_server()
    fake.url = str(server.make_url(""))
    yield fake
    await server.close()


@pytest.fixture
def remote(backend) -> SupabaseGateway:
    return SupabaseGateway(backend.url, API_KEY)


class TestSupabaseGateway:

    async def test_requires_url_and_key(self):
        with pytest.raises(ValueError):
            SupabaseGateway("", API_KEY)

    async def test_select_query_string(self, backend, remote):
        backend.responses[("GET", "/rest/v1/menu_catalog")] = (200, [{"id": "m1"}])

        rows = await remote.select(
            "menu_catalog",
            filters={"available": True, "category": "Sweets"},
            order=Order("date_added"),
            columns=["id", "category"],
        )

        assert rows == [{"id": "m1"}]
        assert backend.last["query"] == {
            "select": "id,category",
            "available": "eq.true",
            "category": "eq.Sweets",
            "order": "date_added.desc",
        }
        assert backend.last["headers"]["apikey"] == API_KEY
        assert backend.last["headers"]["Authorization"] == f"Bearer {API_KEY}"

    async def test_select_defaults(self, backend, remote):
        await remote.select("reviews", order=Order("created_at", descending=False))

        assert backend.last["query"] == {"select": "*", "order": "created_at.asc"}

    async def test_insert_returns_representation(self, backend, remote):
        backend.responses[("POST", "/rest/v1/reviews")] = (201, [{"id": "r1", "rating": 5}])

        row = await remote.insert("reviews", {"rating": 5})

        assert row == {"id": "r1", "rating": 5}
        assert json.loads(backend.last["body"]) == [{"rating": 5}]
        assert backend.last["headers"]["Prefer"] == "return=representation"

    async def test_update_targets_single_id(self, backend, remote):
        backend.responses[("PATCH", "/rest/v1/admin")] = (200, [{"id": "a1"}])

        await remote.update("admin", "a1", {"username": "owner"})

        assert backend.last["query"] == {"id": "eq.a1"}
        assert json.loads(backend.last["body"]) == {"username": "owner"}

    async def test_update_missing_row(self, remote):
        with pytest.raises(GatewayError) as exc_info:
            await remote.update("admin", "ghost", {"username": "x"})

        assert exc_info.value.operation == "update"

    async def test_delete_missing_row(self, remote):
        with pytest.raises(GatewayError):
            await remote.delete("reviews", "ghost")

    async def test_http_error(self, backend, remote):
        backend.responses[("GET", "/rest/v1/admin")] = (400, '{"message":"column does not exist"}')

        with pytest.raises(GatewayError) as exc_info:
            await remote.select("admin")

        assert "HTTP 400" in exc_info.value.detail

    async def test_connection_failure(self):
        unreachable = SupabaseGateway("http://127.0.0.1:1", API_KEY)

        with pytest.raises(GatewayError):
            await unreachable.select("reviews")


class TestSupabaseStorage:

    async def test_upload_headers(self, backend):
        storage = SupabaseStorage(backend.url, API_KEY)
        backend.responses[("POST", "/storage/v1/object/menu-images/1_a.jpg")] = (200, {"Key": "k"})

        await storage.upload("menu-images", "1_a.jpg", b"\xff\xd8", "image/jpeg", overwrite=False)

        assert backend.last["body"] == b"\xff\xd8"
        assert backend.last["headers"]["Content-Type"] == "image/jpeg"
        assert backend.last["headers"]["x-upsert"] == "false"

    async def test_public_url(self):
        storage = SupabaseStorage("https://abc.supabase.co/", API_KEY)

        assert storage.get_public_url("admin-avatars", "1_me.png") == (
            "https://abc.supabase.co/storage/v1/object/public/admin-avatars/1_me.png"
        )
