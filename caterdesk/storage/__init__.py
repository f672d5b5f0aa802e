"""
Storage Module for CaterDesk

Everything behind the persistence gateway boundary:
- Gateway protocols (tables + blobs)
- SQLAlchemy gateway for local/hosted SQL databases
- Supabase gateway and storage client
- Canonical entity schemas and row normalization
"""

from caterdesk.storage.gateway import (
    Order,
    PersistenceGateway,
    BlobStore,
)
from caterdesk.storage.sql_gateway import SQLGateway
from caterdesk.storage.blob_store import LocalBlobStore
from caterdesk.storage.supabase import (
    SupabaseGateway,
    SupabaseStorage,
)
from caterdesk.storage.schemas import (
    Session,
    Admin,
    Review,
    Inquiry,
    MenuItem,
    InquiryGeneration,
    MenuGeneration,
)

__all__ = [
    # Gateway
    "Order",
    "PersistenceGateway",
    "BlobStore",
    "SQLGateway",
    "LocalBlobStore",
    "SupabaseGateway",
    "SupabaseStorage",
    # Entities
    "Session",
    "Admin",
    "Review",
    "Inquiry",
    "MenuItem",
    "InquiryGeneration",
    "MenuGeneration",
]
