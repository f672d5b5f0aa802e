"""
Review API Routes.

Endpoints:
- GET    /reviews       - List reviews, newest first
- POST   /reviews       - Create a review
- PUT    /reviews/{id}  - Update a review
- DELETE /reviews/{id}  - Delete a review
"""

from fastapi import APIRouter, Depends, Request, status

from ..dependencies import ServiceContainer, get_service_container, require_view
from ..schemas import ActionResponse, ViewResponse
from ..views import action_response, read_form, render_view

router = APIRouter(
    prefix="/reviews",
    tags=["reviews"],
    dependencies=[Depends(require_view("reviews"))],
)


@router.get("", response_model=ViewResponse)
async def list_reviews(services: ServiceContainer = Depends(get_service_container)):
    controller = services.reviews
    await controller.load()
    return render_view(services, "reviews", controller.snapshot())


@router.post("", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    request: Request,
    services: ServiceContainer = Depends(get_service_container),
):
    """Body: ``client_name``, ``review_text``, ``rating`` (1-5, default 5)."""
    form, _ = await read_form(request)
    result = await services.reviews.submit(form)
    return action_response(services, result, status.HTTP_201_CREATED)


@router.put("/{review_id}", response_model=ActionResponse)
async def update_review(
    review_id: str,
    request: Request,
    services: ServiceContainer = Depends(get_service_container),
):
    form, _ = await read_form(request)
    result = await services.reviews.submit(form, editing_id=review_id)
    return action_response(services, result)


@router.delete("/{review_id}", response_model=ActionResponse)
async def delete_review(
    review_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    result = await services.reviews.delete(review_id)
    return action_response(services, result)
