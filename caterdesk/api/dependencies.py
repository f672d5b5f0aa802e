"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Service instances (gateway, blob store, auth gate, controllers)
- The session guard for protected views
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from fastapi import Depends, Request
from loguru import logger

from ..auth import AuthGate, RouteKind, SessionStore
from ..storage.schemas import InquiryGeneration, MenuGeneration, Session


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./caterdesk.db"
    database_echo: bool = False

    # Backend: "sql" (SQLAlchemy + local media) or "supabase"
    gateway: str = "sql"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # Local state
    session_path: str = "./data/session.json"
    media_root: str = "./data/media"
    media_url: str = "/media"

    # File uploads
    menu_bucket: str = "menu-images"
    avatar_bucket: str = "admin-avatars"
    max_upload_size_mb: int = 5

    # Table generations
    menu_schema: str = MenuGeneration.CATALOG.value
    inquiry_schema: str = InquiryGeneration.EVENT.value

    # Branding
    business_name: str = "Jagdamba Caterers"

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            gateway=os.getenv("GATEWAY", cls.gateway).lower(),
            supabase_url=os.getenv("SUPABASE_URL"),
            supabase_key=os.getenv("SUPABASE_KEY"),
            session_path=os.getenv("SESSION_PATH", cls.session_path),
            media_root=os.getenv("MEDIA_ROOT", cls.media_root),
            media_url=os.getenv("MEDIA_URL", cls.media_url),
            menu_bucket=os.getenv("MENU_BUCKET", cls.menu_bucket),
            avatar_bucket=os.getenv("AVATAR_BUCKET", cls.avatar_bucket),
            max_upload_size_mb=int(os.getenv("MAX_UPLOAD_SIZE_MB", cls.max_upload_size_mb)),
            menu_schema=os.getenv("MENU_SCHEMA", cls.menu_schema).lower(),
            inquiry_schema=os.getenv("INQUIRY_SCHEMA", cls.inquiry_schema).lower(),
            business_name=os.getenv("BUSINESS_NAME", cls.business_name),
            environment=os.getenv("CATERDESK_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Service Container (Lazy Loading)
# =============================================================================

class ServiceContainer:
    """
    Container for lazy-loaded service instances.

    One container per application; it owns the single AuthGate, so every
    route sees the same session state.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._gateway = None
        self._blob_store = None
        self._session_store = None
        self._auth_gate = None
        self._notifier = None
        self._upload_pipeline = None
        self._reviews = None
        self._inquiries = None
        self._menu = None
        self._admins = None
        self._dashboard = None

    @property
    def uses_supabase(self) -> bool:
        return self.settings.gateway == "supabase"

    @property
    def gateway(self):
        """Get persistence gateway instance."""
        if self._gateway is None:
            if self.uses_supabase:
                from ..storage.supabase import SupabaseGateway
                self._gateway = SupabaseGateway(
                    self.settings.supabase_url,
                    self.settings.supabase_key,
                )
            else:
                from ..storage.sql_gateway import SQLGateway
                self._gateway = SQLGateway(
                    self.settings.database_url,
                    echo=self.settings.database_echo,
                )
        return self._gateway

    @property
    def blob_store(self):
        """Get blob store instance."""
        if self._blob_store is None:
            if self.uses_supabase:
                from ..storage.supabase import SupabaseStorage
                self._blob_store = SupabaseStorage(
                    self.settings.supabase_url,
                    self.settings.supabase_key,
                )
            else:
                from ..storage.blob_store import LocalBlobStore
                self._blob_store = LocalBlobStore(
                    self.settings.media_root,
                    base_url=self.settings.media_url,
                )
        return self._blob_store

    @property
    def session_store(self) -> SessionStore:
        if self._session_store is None:
            self._session_store = SessionStore(self.settings.session_path)
        return self._session_store

    @property
    def auth_gate(self) -> AuthGate:
        if self._auth_gate is None:
            self._auth_gate = AuthGate(self.session_store)
        return self._auth_gate

    @property
    def notifier(self):
        if self._notifier is None:
            from ..notifications import Notifier
            self._notifier = Notifier()
        return self._notifier

    @property
    def upload_pipeline(self):
        if self._upload_pipeline is None:
            from ..uploads import UploadPipeline
            self._upload_pipeline = UploadPipeline(
                self.blob_store,
                max_bytes=self.settings.max_upload_bytes,
            )
        return self._upload_pipeline

    @property
    def reviews(self):
        """Get review controller instance."""
        if self._reviews is None:
            from ..controllers import ReviewController
            self._reviews = ReviewController(self.gateway, self.notifier)
        return self._reviews

    @property
    def inquiries(self):
        """Get inquiry controller instance."""
        if self._inquiries is None:
            from ..controllers import InquiryController
            self._inquiries = InquiryController(
                self.gateway,
                self.notifier,
                generation=InquiryGeneration(self.settings.inquiry_schema),
                business_name=self.settings.business_name,
            )
        return self._inquiries

    @property
    def menu(self):
        """Get menu item controller instance."""
        if self._menu is None:
            from ..controllers import MenuItemController
            self._menu = MenuItemController(
                self.gateway,
                self.notifier,
                pipeline=self.upload_pipeline,
                generation=MenuGeneration(self.settings.menu_schema),
                bucket=self.settings.menu_bucket,
            )
        return self._menu

    @property
    def admins(self):
        """Get admin controller instance."""
        if self._admins is None:
            from ..controllers import AdminController
            self._admins = AdminController(
                self.gateway,
                self.notifier,
                self.auth_gate,
                pipeline=self.upload_pipeline,
                bucket=self.settings.avatar_bucket,
            )
        return self._admins

    @property
    def dashboard(self):
        """Get dashboard controller instance."""
        if self._dashboard is None:
            from ..controllers import DashboardController
            self._dashboard = DashboardController(
                self.gateway,
                self.notifier,
                inquiry_generation=InquiryGeneration(self.settings.inquiry_schema),
                menu_generation=MenuGeneration(self.settings.menu_schema),
            )
        return self._dashboard

    async def startup(self) -> None:
        """Prepare storage and settle the auth gate. Called once per process."""
        if not self.uses_supabase:
            await self.gateway.create_tables()
            Path(self.settings.media_root).mkdir(parents=True, exist_ok=True)
        self.auth_gate.initialize()

    async def shutdown(self) -> None:
        if self._gateway is not None and hasattr(self._gateway, "dispose"):
            await self._gateway.dispose()


def get_service_container(request: Request) -> ServiceContainer:
    """Get the application's service container."""
    return request.app.state.services


# =============================================================================
# Individual Service Dependencies
# =============================================================================

def get_auth_gate(
    container: ServiceContainer = Depends(get_service_container),
) -> AuthGate:
    """Dependency for the auth gate."""
    return container.auth_gate


def get_notifier(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for the notifier."""
    return container.notifier


# =============================================================================
# Session Guard
# =============================================================================

class GateInitializing(Exception):
    """The auth gate has not settled yet."""


class LoginRequired(Exception):
    """No session; the client is sent to the login view."""

    def __init__(self, target: str = "login"):
        self.target = target
        super().__init__(target)


def require_view(view: str):
    """
    Build a dependency that admits a request for ``view`` only when the gate
    renders it.

    Raises:
        GateInitializing: Gate still loading (503).
        LoginRequired: No session (303 to the login view).
    """

    async def dependency(gate: AuthGate = Depends(get_auth_gate)) -> Session:
        decision = gate.resolve(view)
        if decision.kind == RouteKind.LOADING:
            raise GateInitializing()
        if decision.kind == RouteKind.REDIRECT:
            logger.debug(f"Redirecting {view} -> {decision.target}")
            raise LoginRequired(decision.target)
        return gate.current_user

    return dependency


# Guard for API routes that are not tied to one view
require_session = require_view("dashboard")
