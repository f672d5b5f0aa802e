"""
API Schemas for CaterDesk

Pydantic models for request bodies and the JSON view models the routes return:
- Login / session
- View payloads (list state + notifications + page title)
- Action outcomes

Entity form fields are validated by the controllers, not here, so the same
rules apply whichever surface submits the form.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..controllers import ActionResult
from ..notifications import Notification


# =============================================================================
# Page titles
# =============================================================================

PAGE_NAMES = {
    "login": "Login",
    "dashboard": "Dashboard",
    "reviews": "Reviews",
    "contacts": "Potential Clients",
    "menu": "Menu Items",
    "admins": "Admins",
}


def page_title(view: str, business_name: str) -> str:
    """Window title for a view, e.g. ``Reviews | Jagdamba Caterers - Admin Panel``."""
    base = f"{business_name} - Admin Panel"
    page = PAGE_NAMES.get(view)
    return f"{page} | {base}" if page else base


# =============================================================================
# Auth
# =============================================================================

class LoginRequest(BaseModel):
    """Login form. Emails are not format-checked here so every failure reads the same."""

    email: str = ""
    password: str = ""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "owner@jagdambacaterers.in", "password": "••••••••"}
        }
    )


class SessionResponse(BaseModel):
    id: str
    username: str
    email: str
    profile_picture_url: Optional[str] = None


class LoginViewResponse(BaseModel):
    title: str
    authenticated: bool = False


# =============================================================================
# Views and actions
# =============================================================================

class NotificationResponse(BaseModel):
    level: str
    title: str
    description: Optional[str] = None
    created_at: str

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        return cls(**notification.to_dict())


class LoginResponse(SessionResponse):
    """The new session plus the welcome notification."""

    notifications: list[NotificationResponse] = Field(default_factory=list)


class ViewResponse(BaseModel):
    """State of one list view as the UI renders it."""

    title: str
    user: Optional[SessionResponse] = None
    state: dict[str, Any] = Field(default_factory=dict)
    notifications: list[NotificationResponse] = Field(default_factory=list)


class ActionResponse(BaseModel):
    """Outcome of a mutation."""

    ok: bool
    busy: bool = False
    error: Optional[str] = None
    code: Optional[str] = None
    field: Optional[str] = None
    notifications: list[NotificationResponse] = Field(default_factory=list)

    @classmethod
    def from_result(
        cls,
        result: ActionResult,
        notifications: list[Notification],
    ) -> "ActionResponse":
        error = result.error
        return cls(
            ok=result.ok,
            busy=result.busy,
            error=error.message if error else ("Request already in progress" if result.busy else None),
            code=error.code if error else None,
            field=getattr(error, "field", None),
            notifications=[NotificationResponse.from_notification(n) for n in notifications],
        )


class HealthResponse(BaseModel):
    status: str
    version: str
    components: dict[str, str]
