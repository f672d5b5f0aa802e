"""
Menu catalog.

Menu items may carry a photo. A selected photo goes through the upload
pipeline and its public URL is written with the row in the same submit.
"""

from typing import Optional

from caterdesk.controllers.base import ActionResult, EntityController
from caterdesk.errors import NotFoundError
from caterdesk.notifications import Notifier
from caterdesk.storage.gateway import PersistenceGateway
from caterdesk.storage.schemas import (
    MENU_TABLES,
    MenuGeneration,
    MenuItem,
    MenuItemForm,
    menu_item_from_row,
    menu_item_to_row,
)
from caterdesk.uploads import MENU_IMAGES_BUCKET, UploadPipeline


def format_price(price: float) -> str:
    """Indian-rupee display price, e.g. ``₹1,250``."""
    if float(price).is_integer():
        return f"₹{int(price):,}"
    return f"₹{price:,.2f}"


class MenuItemController(EntityController):
    entity_label = "Menu item"
    plural_label = "menu items"
    form_model = MenuItemForm
    upload_field = "image_url"

    def __init__(
        self,
        gateway: PersistenceGateway,
        notifier: Notifier,
        pipeline: Optional[UploadPipeline] = None,
        generation: MenuGeneration = MenuGeneration.CATALOG,
        bucket: str = MENU_IMAGES_BUCKET,
    ):
        self.generation = MenuGeneration(generation)
        super().__init__(
            gateway,
            notifier,
            MENU_TABLES[self.generation],
            pipeline=pipeline,
            bucket=bucket,
        )

    def from_row(self, row: dict) -> MenuItem:
        return menu_item_from_row(row, self.generation)

    def to_row(self, values: dict) -> dict:
        return menu_item_to_row(values, self.generation)

    def empty_form(self) -> dict:
        return {
            "hindi_name": "",
            "english_name": "",
            "description": "",
            "price": "",
            "category": "",
            "available": True,
            "image_url": "",
        }

    @property
    def available_count(self) -> int:
        return sum(1 for item in self.rows if item.available)

    async def toggle_availability(self, id: str) -> ActionResult:
        item = self.find(id)
        if item is None:
            return self._fail(NotFoundError(self.entity_label, id))

        available = not item.available
        state = "available" if available else "unavailable"
        return await self.patch(
            id,
            {"available": available},
            f"{item.hindi_name} marked as {state}",
        )

    def snapshot(self) -> dict:
        data = super().snapshot()
        data["available_count"] = self.available_count
        data["total_count"] = len(self.rows)
        data["prices"] = {item.id: format_price(item.price) for item in self.rows}
        return data
