"""
Menu API Routes.

Endpoints:
- GET    /menu                     - List menu items with availability summary
- POST   /menu                     - Create an item (multipart, optional ``image``)
- PUT    /menu/{id}                - Update an item (multipart, optional ``image``)
- PATCH  /menu/{id}/availability   - Flip availability
- DELETE /menu/{id}                - Delete an item

A new image is uploaded before the row is written; if the upload fails the
row is left untouched.
"""

from fastapi import APIRouter, Depends, Request, status

from ..dependencies import ServiceContainer, get_service_container, require_view
from ..schemas import ActionResponse, ViewResponse
from ..views import action_response, read_form, render_view

router = APIRouter(
    prefix="/menu",
    tags=["menu"],
    dependencies=[Depends(require_view("menu"))],
)

IMAGE_FIELD = "image"


@router.get("", response_model=ViewResponse)
async def list_menu_items(services: ServiceContainer = Depends(get_service_container)):
    controller = services.menu
    await controller.load()
    return render_view(services, "menu", controller.snapshot())


@router.post("", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    request: Request,
    services: ServiceContainer = Depends(get_service_container),
):
    form, image = await read_form(request, IMAGE_FIELD)
    result = await services.menu.submit(form, upload=image)
    return action_response(services, result, status.HTTP_201_CREATED)


@router.put("/{item_id}", response_model=ActionResponse)
async def update_menu_item(
    item_id: str,
    request: Request,
    services: ServiceContainer = Depends(get_service_container),
):
    form, image = await read_form(request, IMAGE_FIELD)
    result = await services.menu.submit(form, editing_id=item_id, upload=image)
    return action_response(services, result)


@router.patch("/{item_id}/availability", response_model=ActionResponse)
async def toggle_availability(
    item_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    controller = services.menu
    if controller.find(item_id) is None:
        await controller.load()
    result = await controller.toggle_availability(item_id)
    return action_response(services, result)


@router.delete("/{item_id}", response_model=ActionResponse)
async def delete_menu_item(
    item_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    result = await services.menu.delete(item_id)
    return action_response(services, result)
