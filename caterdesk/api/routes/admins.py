"""
Admin account API Routes.

Endpoints:
- GET    /admins       - List admins
- POST   /admins       - Create an admin (multipart, optional ``avatar``)
- PUT    /admins/{id}  - Update an admin; blank password keeps the current one
- DELETE /admins/{id}  - Delete an admin (not yourself, not the last one)
"""

from fastapi import APIRouter, Depends, Request, status

from ..dependencies import ServiceContainer, get_service_container, require_view
from ..schemas import ActionResponse, ViewResponse
from ..views import action_response, read_form, render_view

router = APIRouter(
    prefix="/admins",
    tags=["admins"],
    dependencies=[Depends(require_view("admins"))],
)

AVATAR_FIELD = "avatar"


@router.get("", response_model=ViewResponse)
async def list_admins(services: ServiceContainer = Depends(get_service_container)):
    controller = services.admins
    await controller.load()
    state = controller.snapshot()
    current = services.auth_gate.current_user
    state["current_admin_id"] = current.id if current else None
    return render_view(services, "admins", state)


@router.post("", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def create_admin(
    request: Request,
    services: ServiceContainer = Depends(get_service_container),
):
    form, avatar = await read_form(request, AVATAR_FIELD)
    result = await services.admins.submit(form, upload=avatar)
    return action_response(services, result, status.HTTP_201_CREATED)


@router.put("/{admin_id}", response_model=ActionResponse)
async def update_admin(
    admin_id: str,
    request: Request,
    services: ServiceContainer = Depends(get_service_container),
):
    form, avatar = await read_form(request, AVATAR_FIELD)
    result = await services.admins.submit(form, editing_id=admin_id, upload=avatar)
    return action_response(services, result)


@router.delete("/{admin_id}", response_model=ActionResponse)
async def delete_admin(
    admin_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    result = await services.admins.delete(admin_id)
    return action_response(services, result)
