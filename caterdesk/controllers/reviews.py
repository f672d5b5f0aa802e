"""Client reviews."""

from caterdesk.controllers.base import EntityController
from caterdesk.notifications import Notifier
from caterdesk.storage.gateway import PersistenceGateway
from caterdesk.storage.schemas import (
    REVIEW_TABLE,
    Review,
    ReviewForm,
    review_from_row,
    review_to_row,
)


class ReviewController(EntityController):
    entity_label = "Review"
    plural_label = "reviews"
    form_model = ReviewForm

    def __init__(self, gateway: PersistenceGateway, notifier: Notifier):
        super().__init__(gateway, notifier, REVIEW_TABLE)

    def from_row(self, row: dict) -> Review:
        return review_from_row(row)

    def to_row(self, values: dict) -> dict:
        return review_to_row(values)

    def empty_form(self) -> dict:
        return {"client_name": "", "review_text": "", "rating": 5}
