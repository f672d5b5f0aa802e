"""
Dashboard route: overview statistics for the signed-in admin.
"""

from fastapi import APIRouter, Depends

from ..dependencies import ServiceContainer, get_service_container, require_view
from ..schemas import ViewResponse
from ..views import render_view

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=ViewResponse)
async def dashboard(
    _session=Depends(require_view("dashboard")),
    services: ServiceContainer = Depends(get_service_container),
):
    """
    Totals for reviews, potential clients, menu items and admins, plus the
    rating and category charts. A failed table read shows as zero and is
    listed under ``failed_sources``.
    """
    stats = await services.dashboard.load()
    return render_view(services, "dashboard", stats.model_dump())
