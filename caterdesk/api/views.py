"""
Helpers shared by the view routes: form decoding and response building.
"""

from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from ..controllers import ActionResult
from ..errors import ValidationError
from ..storage.schemas import Session
from ..uploads import UploadedFile
from .dependencies import ServiceContainer
from .schemas import (
    ActionResponse,
    NotificationResponse,
    SessionResponse,
    ViewResponse,
    page_title,
)


async def read_form(request: Request, file_field: Optional[str] = None) -> tuple[dict, Optional[UploadedFile]]:
    """
    Decode a JSON or form-encoded body into form values and an optional file.

    An empty file input (no filename) counts as no file.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        body = await request.json()
        if not isinstance(body, dict):
            raise ValidationError("Form body must be an object")
        return body, None

    form = await request.form()
    values: dict = {}
    upload = None
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == file_field and value.filename:
                upload = UploadedFile(
                    filename=value.filename,
                    content_type=value.content_type,
                    data=await value.read(),
                )
            elif key != file_field:
                raise ValidationError(f"Unexpected file field: {key}", field=key)
        else:
            values[key] = value
    return values, upload


def session_response(session: Optional[Session]) -> Optional[SessionResponse]:
    if session is None:
        return None
    return SessionResponse(**session.model_dump())


def render_view(services: ServiceContainer, view: str, state: dict) -> ViewResponse:
    return ViewResponse(
        title=page_title(view, services.settings.business_name),
        user=session_response(services.auth_gate.current_user),
        state=state,
        notifications=[
            NotificationResponse.from_notification(n) for n in services.notifier.drain()
        ],
    )


def action_response(
    services: ServiceContainer,
    result: ActionResult,
    success_status: int = status.HTTP_200_OK,
) -> JSONResponse:
    body = ActionResponse.from_result(result, services.notifier.drain())
    status_code = success_status if result.ok else result.status_code
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
