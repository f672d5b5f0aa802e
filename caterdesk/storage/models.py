"""
Database models for CaterDesk.

Table and column names follow the hosted schema, including both generations of
the inquiry and menu tables. Ids and timestamps are assigned here (column
defaults) so that rows come back from an insert with server-side values.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdminModel(Base):
    """Administrator accounts."""
    __tablename__ = "admin"

    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    profile_picture = Column(String(500))
    created_at = Column(DateTime, default=_utcnow, index=True)


class ReviewModel(Base):
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, default=_new_id)
    client_name = Column(String(200), nullable=False)
    review_text = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow, index=True)


class ContactModel(Base):
    """First-generation inquiries (plain contact form)."""
    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50))
    message = Column(Text)
    created_at = Column(DateTime, default=_utcnow, index=True)


class ContactFormModel(Base):
    """Second-generation inquiries with event details."""
    __tablename__ = "contact_form"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50))
    event_type = Column(String(100))
    event_date = Column(String(50))
    guest_count = Column(Integer)
    message = Column(Text)
    submitted_at = Column(DateTime, default=_utcnow, index=True)


class MenuItemModel(Base):
    """First-generation menu items."""
    __tablename__ = "menu_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    price = Column(Float, nullable=False)
    category = Column(String(100))
    available = Column(Boolean, default=True)
    image_url = Column(String(500))
    created_at = Column(DateTime, default=_utcnow, index=True)


class MenuCatalogModel(Base):
    """Second-generation menu items with bilingual names."""
    __tablename__ = "menu_catalog"

    id = Column(String(36), primary_key=True, default=_new_id)
    hindi_name = Column(String(200), nullable=False)
    english_name = Column(String(200))
    description = Column(Text)
    price = Column(Float, nullable=False)
    category = Column(String(100))
    available = Column(Boolean, default=True)
    image = Column(String(500))
    date_added = Column(DateTime, default=_utcnow, index=True)
