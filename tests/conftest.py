"""
Pytest configuration and fixtures for CaterDesk tests.
"""

from pathlib import Path
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from caterdesk.api.main import create_app
from caterdesk.api.dependencies import Settings
from caterdesk.auth import AuthGate, SessionStore, hash_password
from caterdesk.notifications import Notifier
from caterdesk.storage.blob_store import LocalBlobStore
from caterdesk.storage.gateway import Order
from caterdesk.storage.sql_gateway import SQLGateway
from caterdesk.uploads import UploadedFile, UploadPipeline


ADMIN_EMAIL = "owner@jagdambacaterers.in"
ADMIN_PASSWORD = "tandoor-2024"


# =============================================================================
# Test Settings
# =============================================================================

@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing every piece of local state into tmp_path."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'caterdesk.db'}",
        session_path=str(tmp_path / "session.json"),
        media_root=str(tmp_path / "media"),
        environment="test",
        debug=False,
    )


# =============================================================================
# Recording doubles
# =============================================================================

class RecordingGateway:
    """
    Delegates to a real gateway and records every call in ``calls``.

    ``fail`` maps ``(operation, table)`` to an exception raised instead of
    delegating.
    """

    def __init__(self, inner, calls: Optional[list] = None):
        self.inner = inner
        self.calls = calls if calls is not None else []
        self.fail: dict = {}

    def _record(self, operation: str, table: str, payload=None):
        self.calls.append((operation, table, payload))
        error = self.fail.get((operation, table))
        if error is not None:
            raise error

    def count(self, operation: Optional[str] = None) -> int:
        return sum(1 for call in self.calls if operation is None or call[0] == operation)

    async def select(self, table, filters=None, order: Optional[Order] = None, columns=None):
        self._record("select", table, filters)
        return await self.inner.select(table, filters=filters, order=order, columns=columns)

    async def insert(self, table, row):
        self._record("insert", table, dict(row))
        return await self.inner.insert(table, row)

    async def update(self, table, id, patch):
        self._record("update", table, dict(patch))
        return await self.inner.update(table, id, patch)

    async def delete(self, table, id):
        self._record("delete", table, id)
        return await self.inner.delete(table, id)


class RecordingBlobStore:
    """Delegates to a real blob store and records uploads in ``calls``."""

    def __init__(self, inner, calls: Optional[list] = None):
        self.inner = inner
        self.calls = calls if calls is not None else []
        self.fail_with: Optional[Exception] = None

    async def upload(self, bucket, key, data, content_type, overwrite=True):
        self.calls.append(("upload", bucket, key))
        if self.fail_with is not None:
            raise self.fail_with
        await self.inner.upload(bucket, key, data, content_type, overwrite=overwrite)

    def get_public_url(self, bucket, key):
        return self.inner.get_public_url(bucket, key)

    @property
    def upload_count(self) -> int:
        return sum(1 for call in self.calls if call[0] == "upload")


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def sql_gateway(test_settings) -> AsyncGenerator[SQLGateway, None]:
    gateway = SQLGateway(test_settings.database_url)
    await gateway.create_tables()
    yield gateway
    await gateway.dispose()


@pytest.fixture
def calls() -> list:
    """Shared call log, so gateway and blob calls can be ordered."""
    return []


@pytest.fixture
def gateway(sql_gateway, calls) -> RecordingGateway:
    return RecordingGateway(sql_gateway, calls)


@pytest.fixture
def blob_store(test_settings, calls) -> RecordingBlobStore:
    return RecordingBlobStore(LocalBlobStore(test_settings.media_root), calls)


@pytest.fixture
def pipeline(blob_store) -> UploadPipeline:
    return UploadPipeline(blob_store)


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


# =============================================================================
# Auth Fixtures
# =============================================================================

@pytest.fixture
def session_store(test_settings) -> SessionStore:
    return SessionStore(test_settings.session_path)


@pytest.fixture
def gate(session_store) -> AuthGate:
    auth_gate = AuthGate(session_store)
    auth_gate.initialize()
    return auth_gate


@pytest_asyncio.fixture
async def seeded_admin(sql_gateway) -> dict:
    """One admin row with a known password."""
    return await sql_gateway.insert(
        "admin",
        {
            "username": "owner",
            "email": ADMIN_EMAIL,
            "password_hash": hash_password(ADMIN_PASSWORD),
        },
    )


# =============================================================================
# Upload Fixtures
# =============================================================================

@pytest.fixture
def jpeg_file() -> UploadedFile:
    return UploadedFile(
        filename="paneer tikka.jpg",
        content_type="image/jpeg",
        data=b"\xff\xd8\xff\xe0" + b"\x00" * 1024,
    )


@pytest.fixture
def oversized_jpeg() -> UploadedFile:
    return UploadedFile(
        filename="thali.jpg",
        content_type="image/jpeg",
        data=b"\x00" * (6 * 1024 * 1024),
    )


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def app(test_settings):
    """FastAPI application with started services (ASGITransport skips lifespan)."""
    application = create_app(test_settings)
    services = application.state.services
    await services.startup()

    yield application

    await services.shutdown()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def api_admin(app) -> dict:
    """Admin row in the application's own database."""
    return await app.state.services.gateway.insert(
        "admin",
        {
            "username": "owner",
            "email": ADMIN_EMAIL,
            "password_hash": hash_password(ADMIN_PASSWORD),
        },
    )


@pytest_asyncio.fixture
async def auth_client(client, api_admin) -> AsyncClient:
    """Client with a signed-in session."""
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client
