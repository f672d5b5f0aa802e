"""
CaterDesk API

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger

from .schemas import HealthResponse
from .routes import admins, auth, dashboard, inquiries, menu, reviews
from .middleware import (
    setup_cors,
    setup_logging,
    setup_exception_handlers,
    LoggingConfig,
    get_cors_config,
    view_url,
)
from .dependencies import (
    get_settings,
    ServiceContainer,
    Settings,
)


VERSION = "1.0.0"


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup creates tables (SQL backend), prepares the media directory and
    settles the auth gate from the stored session. Shutdown releases the
    database engine.
    """
    services: ServiceContainer = app.state.services
    logger.info(f"Starting CaterDesk in {services.settings.environment} mode")

    try:
        await services.startup()
        logger.info(f"CaterDesk started ({services.auth_gate.state.value})")

        yield

    finally:
        logger.info("Shutting down CaterDesk...")
        await services.shutdown()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="CaterDesk",
        description=f"Admin panel for {settings.business_name}.",
        version=VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = ServiceContainer(settings)

    # ==========================================================================
    # Middleware (order matters - first added = outermost)
    # ==========================================================================

    setup_logging(
        app,
        config=LoggingConfig(
            enabled=True,
            log_request_body=settings.debug,
        ),
        structured=settings.environment != "development",
    )

    setup_exception_handlers(app)

    setup_cors(app, config=get_cors_config(settings.environment))

    # ==========================================================================
    # Routers
    # ==========================================================================

    api_prefix = "/api/v1"

    for router in (
        auth.router,
        dashboard.router,
        reviews.router,
        inquiries.router,
        menu.router,
        admins.router,
    ):
        app.include_router(router, prefix=api_prefix)

    # Uploaded images for the local blob store
    if settings.gateway != "supabase":
        app.mount(
            settings.media_url,
            StaticFiles(directory=Path(settings.media_root), check_dir=False),
            name="media",
        )

    # ==========================================================================
    # Root Routes
    # ==========================================================================

    @app.get("/", include_in_schema=False)
    async def root(request: Request):
        """Send the browser to the view the gate picks for the root path."""
        decision = request.app.state.services.auth_gate.resolve("")
        return RedirectResponse(view_url(decision.target), status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check(request: Request) -> HealthResponse:
        """Status of the gateway configuration and the auth gate."""
        services: ServiceContainer = request.app.state.services

        components = {
            "gateway": settings.gateway,
            "auth_gate": services.auth_gate.state.value,
            "notifications_pending": str(len(services.notifier.pending)),
        }
        overall_healthy = True

        if services.uses_supabase and not (settings.supabase_url and settings.supabase_key):
            components["gateway"] = "supabase: not_configured"
            overall_healthy = False

        return HealthResponse(
            status="healthy" if overall_healthy else "degraded",
            version=VERSION,
            components=components,
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    # One worker: the auth gate and session file are process-local
    uvicorn.run(
        "caterdesk.api.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.debug,
        workers=1,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
