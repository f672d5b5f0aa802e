"""
Persistence Gateway contracts.

The dashboard talks to its backend only through these two protocols: a
table-scoped query/mutation API and a blob store. Implementations raise
``caterdesk.errors.GatewayError`` on any backend-side failure.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class Order:
    """Sort order for ``select``."""
    column: str
    descending: bool = True


@runtime_checkable
class PersistenceGateway(Protocol):
    """Table-scoped CRUD operations on the hosted database."""

    async def select(
        self,
        table: str,
        filters: Optional[dict] = None,
        order: Optional[Order] = None,
        columns: Optional[list[str]] = None,
    ) -> list[dict]:
        """Return rows matching all equality ``filters``."""
        ...

    async def insert(self, table: str, row: dict) -> dict:
        """Insert a row and return it with server-assigned fields."""
        ...

    async def update(self, table: str, id: str, patch: dict) -> None:
        """Apply ``patch`` to the row with the given id only."""
        ...

    async def delete(self, table: str, id: str) -> None:
        ...


@runtime_checkable
class BlobStore(Protocol):
    """Object storage with public URLs."""

    async def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        overwrite: bool = True,
    ) -> None:
        ...

    def get_public_url(self, bucket: str, key: str) -> str:
        ...
