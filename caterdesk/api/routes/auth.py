"""
Authentication API Routes for CaterDesk.

Handles:
- Login view (redirects away when already signed in)
- Credential check and session creation
- Logout
- Current session retrieval
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from ...auth import AuthGate, RouteKind, sign_in
from ...notifications import Notifier
from ..dependencies import (
    ServiceContainer,
    get_auth_gate,
    get_notifier,
    get_service_container,
    require_session,
)
from ..middleware.error_handler import view_url
from ..schemas import (
    LoginRequest,
    LoginResponse,
    LoginViewResponse,
    NotificationResponse,
    SessionResponse,
    page_title,
)
from ..views import session_response

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/login", response_model=LoginViewResponse)
async def login_view(services: ServiceContainer = Depends(get_service_container)):
    """Login page state, or a redirect to the dashboard when signed in."""
    decision = services.auth_gate.resolve("login")
    if decision.kind == RouteKind.REDIRECT:
        return RedirectResponse(view_url(decision.target), status_code=status.HTTP_303_SEE_OTHER)
    return LoginViewResponse(title=page_title("login", services.settings.business_name))


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    services: ServiceContainer = Depends(get_service_container),
):
    """
    Sign in with email and password.

    Any mismatch answers 401 "Invalid credentials" without saying which
    part was wrong.
    """
    session = await sign_in(
        services.gateway,
        services.auth_gate,
        credentials.email,
        credentials.password,
    )
    services.notifier.success("Welcome back!", f"Logged in as {session.username}")
    return LoginResponse(
        **session.model_dump(),
        notifications=[
            NotificationResponse.from_notification(n) for n in services.notifier.drain()
        ],
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    gate: AuthGate = Depends(get_auth_gate),
    notifier: Notifier = Depends(get_notifier),
):
    """Clear the session and drop undelivered notifications. Safe to call when not signed in."""
    gate.logout()
    notifier.drain()


@router.get("/me", response_model=SessionResponse)
async def current_session(session=Depends(require_session)):
    """The signed-in admin."""
    return session_response(session)
