"""
Outbound contact links for an inquiry: WhatsApp, phone dial and e-mail.

Links are built from the inquiry's own fields. Opening them is fire-and-forget;
a missing handler is not reported.
"""

import re
import webbrowser
from typing import Optional
from urllib.parse import quote

from pydantic import BaseModel

from caterdesk.storage.schemas import Inquiry


DEFAULT_BUSINESS_NAME = "Jagdamba Caterers"

_NON_DIGITS = re.compile(r"\D")


class ContactLinks(BaseModel):
    whatsapp: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


def whatsapp_message(inquiry: Inquiry, business: str = DEFAULT_BUSINESS_NAME) -> str:
    if inquiry.event_type:
        return (
            f"Hello {inquiry.name}, thank you for your {inquiry.event_type} "
            f"inquiry with {business}! How can we assist you today?"
        )
    return (
        f"Hello {inquiry.name}, thank you for contacting {business}! "
        f"How can we assist you today?"
    )


def whatsapp_link(inquiry: Inquiry, business: str = DEFAULT_BUSINESS_NAME) -> Optional[str]:
    digits = _NON_DIGITS.sub("", inquiry.phone or "")
    if not digits:
        return None
    return f"https://wa.me/{digits}?text={quote(whatsapp_message(inquiry, business))}"


def phone_link(inquiry: Inquiry) -> Optional[str]:
    if not inquiry.phone:
        return None
    return f"tel:{inquiry.phone.strip()}"


def email_link(inquiry: Inquiry, business: str = DEFAULT_BUSINESS_NAME) -> Optional[str]:
    if not inquiry.email:
        return None

    if inquiry.event_type:
        subject = f"Re: Your {inquiry.event_type} inquiry - {business}"
    else:
        subject = f"Re: Your inquiry - {business}"

    body = (
        f"Dear {inquiry.name},\n\n"
        f"Thank you for contacting {business}. We have received your message "
        f"and will get back to you soon."
    )
    if inquiry.event_date:
        body += f"\n\nEvent Date: {inquiry.event_date}"
    body += f"\n\nBest regards,\n{business} Team"

    return f"mailto:{inquiry.email}?subject={quote(subject)}&body={quote(body)}"


def build_links(inquiry: Inquiry, business: str = DEFAULT_BUSINESS_NAME) -> ContactLinks:
    return ContactLinks(
        whatsapp=whatsapp_link(inquiry, business),
        phone=phone_link(inquiry),
        email=email_link(inquiry, business),
    )


def open_link(url: str) -> None:
    """Hand ``url`` to the desktop's default handler."""
    webbrowser.open_new_tab(url)
