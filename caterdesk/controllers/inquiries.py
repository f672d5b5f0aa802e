"""
Customer inquiries ("Potential Clients").

Inquiries arrive from the public website; the dashboard lists, deletes and
follows up on them. Which table is read depends on the configured generation.
"""

from caterdesk.controllers.base import ActionResult, EntityController
from caterdesk.errors import NotFoundError, ValidationError
from caterdesk.links import DEFAULT_BUSINESS_NAME, ContactLinks, build_links, open_link
from caterdesk.notifications import Notifier
from caterdesk.storage.gateway import PersistenceGateway
from caterdesk.storage.schemas import (
    INQUIRY_TABLES,
    Inquiry,
    InquiryForm,
    InquiryGeneration,
    inquiry_from_row,
    inquiry_to_row,
)


CHANNELS = ("whatsapp", "phone", "email")


class InquiryController(EntityController):
    entity_label = "Contact"
    plural_label = "contacts"
    form_model = InquiryForm

    def __init__(
        self,
        gateway: PersistenceGateway,
        notifier: Notifier,
        generation: InquiryGeneration = InquiryGeneration.EVENT,
        business_name: str = DEFAULT_BUSINESS_NAME,
    ):
        self.generation = InquiryGeneration(generation)
        self.business_name = business_name
        super().__init__(gateway, notifier, INQUIRY_TABLES[self.generation])

    def from_row(self, row: dict) -> Inquiry:
        return inquiry_from_row(row, self.generation)

    def to_row(self, values: dict) -> dict:
        return inquiry_to_row(values, self.generation)

    def empty_form(self) -> dict:
        return {"name": "", "email": "", "phone": "", "message": ""}

    def links(self, id: str) -> ContactLinks:
        """
        Raises:
            NotFoundError: ``id`` is not among the loaded rows.
        """
        inquiry = self.find(id)
        if inquiry is None:
            raise NotFoundError("Contact", id)
        return build_links(inquiry, self.business_name)

    def open_contact(self, id: str, channel: str) -> ActionResult:
        """Open the WhatsApp, phone or e-mail link for ``id`` on this machine."""
        try:
            links = self.links(id)
        except NotFoundError as e:
            return self._fail(e)

        url = getattr(links, channel, None) if channel in CHANNELS else None
        if url is None:
            return self._fail(
                ValidationError(f"No {channel} contact for this inquiry", field=channel)
            )

        open_link(url)
        return ActionResult(ok=True)
