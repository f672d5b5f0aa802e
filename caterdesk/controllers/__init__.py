"""
Controllers for CaterDesk views.

One controller per list view, plus the dashboard statistics.
"""

from caterdesk.controllers.base import ActionResult, EntityController
from caterdesk.controllers.reviews import ReviewController
from caterdesk.controllers.inquiries import InquiryController
from caterdesk.controllers.menu_items import MenuItemController, format_price
from caterdesk.controllers.admins import AdminController
from caterdesk.controllers.dashboard import DashboardController, DashboardStats

__all__ = [
    "ActionResult",
    "EntityController",
    "ReviewController",
    "InquiryController",
    "MenuItemController",
    "format_price",
    "AdminController",
    "DashboardController",
    "DashboardStats",
]
