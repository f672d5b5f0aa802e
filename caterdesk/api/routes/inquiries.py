"""
Inquiry ("Potential Clients") API Routes.

Inquiries are created by the public website; the dashboard only lists,
deletes and follows up on them.
"""

from fastapi import APIRouter, Depends

from ...links import ContactLinks
from ..dependencies import ServiceContainer, get_service_container, require_view
from ..schemas import ActionResponse, ViewResponse
from ..views import action_response, render_view

router = APIRouter(
    prefix="/contacts",
    tags=["contacts"],
    dependencies=[Depends(require_view("contacts"))],
)


@router.get("", response_model=ViewResponse)
async def list_inquiries(services: ServiceContainer = Depends(get_service_container)):
    controller = services.inquiries
    await controller.load()
    state = controller.snapshot()
    state["generation"] = controller.generation.value
    return render_view(services, "contacts", state)


@router.delete("/{inquiry_id}", response_model=ActionResponse)
async def delete_inquiry(
    inquiry_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    result = await services.inquiries.delete(inquiry_id)
    return action_response(services, result)


@router.get("/{inquiry_id}/links", response_model=ContactLinks)
async def inquiry_links(
    inquiry_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """WhatsApp, phone and e-mail links pre-filled for this inquiry."""
    controller = services.inquiries
    if controller.find(inquiry_id) is None:
        await controller.load()
    return controller.links(inquiry_id)


@router.post("/{inquiry_id}/links/{channel}/open", response_model=ActionResponse)
async def open_inquiry_link(
    inquiry_id: str,
    channel: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """
    Open one follow-up link (``whatsapp``, ``phone`` or ``email``) with the
    default handler of the machine running the panel.
    """
    controller = services.inquiries
    if controller.find(inquiry_id) is None:
        await controller.load()
    result = controller.open_contact(inquiry_id, channel)
    return action_response(services, result)
