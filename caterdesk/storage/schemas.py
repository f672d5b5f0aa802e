"""
Entity Schemas for CaterDesk

Canonical pydantic models for every entity the dashboard manages, plus the
normalization step between table rows and those models.

Design Decisions:
1. One canonical shape per entity: views and controllers never branch on which
   optional columns a row happens to carry.
2. Tagged generations: inquiries and menu items exist in two table layouts;
   the generation is explicit configuration, and ``*_from_row`` / ``*_to_row``
   are the only places that know the column names.
3. Forms are separate models: they carry client-side validation rules and are
   converted to ``caterdesk.errors.ValidationError`` before any network call.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from caterdesk.errors import ValidationError


# =============================================================================
# Generations and table layout
# =============================================================================

class InquiryGeneration(str, Enum):
    """Which inquiry table a deployment reads."""
    LEGACY = "legacy"   # contacts
    EVENT = "event"     # contact_form


class MenuGeneration(str, Enum):
    """Which menu table a deployment reads."""
    LEGACY = "legacy"    # menu_items
    CATALOG = "catalog"  # menu_catalog


@dataclass(frozen=True)
class TableSpec:
    """A table name and the column its list view is ordered by."""
    table: str
    recency_column: str


ADMIN_TABLE = TableSpec("admin", "created_at")
REVIEW_TABLE = TableSpec("reviews", "created_at")

INQUIRY_TABLES = {
    InquiryGeneration.LEGACY: TableSpec("contacts", "created_at"),
    InquiryGeneration.EVENT: TableSpec("contact_form", "submitted_at"),
}

MENU_TABLES = {
    MenuGeneration.LEGACY: TableSpec("menu_items", "created_at"),
    MenuGeneration.CATALOG: TableSpec("menu_catalog", "date_added"),
}


# =============================================================================
# Canonical entities
# =============================================================================

class Session(BaseModel):
    """The lightweight record kept by the session store."""

    id: str
    username: str
    email: str
    profile_picture_url: Optional[str] = None


class Admin(BaseModel):
    id: str
    username: str
    email: str
    password_hash: str = Field("", exclude=True, repr=False)
    profile_picture_url: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_session(self) -> Session:
        return Session(
            id=self.id,
            username=self.username,
            email=self.email,
            profile_picture_url=self.profile_picture_url,
        )


class Review(BaseModel):
    id: str
    client_name: str
    review_text: str
    rating: int
    created_at: Optional[datetime] = None


class Inquiry(BaseModel):
    """Customer inquiry; event fields are empty for first-generation rows."""

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[str] = None
    guest_count: Optional[int] = None
    message: Optional[str] = None
    submitted_at: Optional[datetime] = None
    generation: InquiryGeneration = InquiryGeneration.EVENT


class MenuItem(BaseModel):
    id: str
    hindi_name: str
    english_name: Optional[str] = None
    description: Optional[str] = None
    price: float
    category: Optional[str] = None
    available: bool = True
    image_url: Optional[str] = None
    date_added: Optional[datetime] = None
    generation: MenuGeneration = MenuGeneration.CATALOG


# =============================================================================
# Row normalization (gateway boundary)
# =============================================================================

def admin_from_row(row: dict) -> Admin:
    return Admin(
        id=str(row["id"]),
        username=row.get("username") or "",
        email=row.get("email") or "",
        password_hash=row.get("password_hash") or "",
        profile_picture_url=row.get("profile_picture"),
        created_at=row.get("created_at"),
    )


def admin_to_row(values: dict) -> dict:
    row = dict(values)
    if "profile_picture_url" in row:
        row["profile_picture"] = row.pop("profile_picture_url")
    return row


def review_from_row(row: dict) -> Review:
    return Review(
        id=str(row["id"]),
        client_name=row["client_name"],
        review_text=row["review_text"],
        rating=int(row["rating"]),
        created_at=row.get("created_at"),
    )


def review_to_row(values: dict) -> dict:
    return dict(values)


def inquiry_from_row(row: dict, generation: InquiryGeneration) -> Inquiry:
    if generation == InquiryGeneration.LEGACY:
        submitted_at = row.get("created_at")
    else:
        submitted_at = row.get("submitted_at")

    return Inquiry(
        id=str(row["id"]),
        name=row.get("name") or "",
        email=row.get("email") or "",
        phone=row.get("phone"),
        event_type=row.get("event_type"),
        event_date=row.get("event_date"),
        guest_count=row.get("guest_count"),
        message=row.get("message"),
        submitted_at=submitted_at,
        generation=generation,
    )


def inquiry_to_row(values: dict, generation: InquiryGeneration) -> dict:
    row = dict(values)
    if generation == InquiryGeneration.LEGACY:
        # The contacts table has no event columns
        for key in ("event_type", "event_date", "guest_count"):
            row.pop(key, None)
    return row


def menu_item_from_row(row: dict, generation: MenuGeneration) -> MenuItem:
    if generation == MenuGeneration.LEGACY:
        return MenuItem(
            id=str(row["id"]),
            hindi_name=row.get("name") or "",
            description=row.get("description"),
            price=float(row.get("price") or 0),
            category=row.get("category"),
            available=bool(row.get("available", True)),
            image_url=row.get("image_url"),
            date_added=row.get("created_at"),
            generation=generation,
        )

    available = row.get("available")
    return MenuItem(
        id=str(row["id"]),
        hindi_name=row.get("hindi_name") or "",
        english_name=row.get("english_name"),
        description=row.get("description"),
        price=float(row.get("price") or 0),
        category=row.get("category"),
        available=True if available is None else bool(available),
        image_url=row.get("image"),
        date_added=row.get("date_added"),
        generation=generation,
    )


def menu_item_to_row(values: dict, generation: MenuGeneration) -> dict:
    row = dict(values)
    if generation == MenuGeneration.LEGACY:
        if "hindi_name" in row:
            row["name"] = row.pop("hindi_name")
        row.pop("english_name", None)
    elif "image_url" in row:
        row["image"] = row.pop("image_url")
    return row


# =============================================================================
# Forms (client-side validation)
# =============================================================================

def normalize_email(email: Optional[str]) -> str:
    """Admin e-mails are stored and looked up in this form only."""
    return (email or "").strip().lower()


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class FormModel(BaseModel):
    """Base for form payloads: trims strings, rejects unknown fields."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


class ReviewForm(FormModel):
    client_name: str = Field(..., min_length=1, max_length=200)
    review_text: str = Field(..., min_length=1)
    rating: int = Field(5, ge=1, le=5)


class InquiryForm(FormModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[str] = None
    guest_count: Optional[int] = Field(None, ge=1)
    message: Optional[str] = None

    @field_validator("phone", "event_type", "event_date", "guest_count", "message", mode="before")
    @classmethod
    def blanks_to_none(cls, value):
        return _blank_to_none(value)


class MenuItemForm(FormModel):
    hindi_name: str = Field(..., min_length=1, max_length=200)
    english_name: Optional[str] = None
    description: Optional[str] = None
    price: float = Field(..., ge=0, allow_inf_nan=False)
    category: Optional[str] = None
    available: bool = True
    image_url: Optional[str] = None

    @field_validator("english_name", "description", "category", "image_url", mode="before")
    @classmethod
    def blanks_to_none(cls, value):
        return _blank_to_none(value)


class AdminForm(FormModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    # Required on create, optional on edit; enforced by the controller
    password: Optional[str] = None
    profile_picture_url: Optional[str] = None

    @field_validator("password", "profile_picture_url", mode="before")
    @classmethod
    def blanks_to_none(cls, value):
        return _blank_to_none(value)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value):
        return normalize_email(value)


def parse_form(form_cls: type[FormModel], data: dict) -> FormModel:
    """
    Validate raw form data.

    Raises:
        ValidationError: On the first failing field, with a readable message.
    """
    try:
        return form_cls.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        label = (field or "form").replace("_", " ").capitalize()
        raise ValidationError(f"{label}: {first['msg']}", field=field, detail=str(e)) from e
