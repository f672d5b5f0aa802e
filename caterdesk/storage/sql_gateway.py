"""
SQL Persistence Gateway

SQLAlchemy implementation of the persistence gateway:
- SQLite (aiosqlite) for local/single-operator deployments and tests
- PostgreSQL (asyncpg) when pointed at a hosted database

Ids and timestamps come from the column defaults in ``models.py`` so an insert
returns the row exactly as a hosted backend would.
"""

from typing import Optional

from loguru import logger
from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from caterdesk.errors import GatewayError
from caterdesk.storage.gateway import Order
from caterdesk.storage.models import Base


class SQLGateway:
    """
    Persistence gateway backed by an async SQLAlchemy engine.

    Usage:
        gateway = SQLGateway("sqlite+aiosqlite:///./caterdesk.db")
        await gateway.create_tables()

        row = await gateway.insert("reviews", {"client_name": "Asha", ...})
        rows = await gateway.select("reviews", order=Order("created_at"))
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
        )
        logger.info(f"SQLGateway initialized: {database_url[:50]}...")

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    def _table(self, operation: str, name: str) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise GatewayError(operation, f"Unknown table: {name}")
        return table

    async def select(
        self,
        table: str,
        filters: Optional[dict] = None,
        order: Optional[Order] = None,
        columns: Optional[list[str]] = None,
    ) -> list[dict]:
        tbl = self._table("select", table)

        try:
            if columns:
                stmt = select(*(tbl.c[name] for name in columns))
            else:
                stmt = select(tbl)

            for key, value in (filters or {}).items():
                stmt = stmt.where(tbl.c[key] == value)

            if order is not None:
                column = tbl.c[order.column]
                stmt = stmt.order_by(column.desc() if order.descending else column.asc())

            async with self.engine.connect() as conn:
                result = await conn.execute(stmt)
                return [dict(row._mapping) for row in result]
        except (SQLAlchemyError, KeyError) as e:
            logger.error(f"select on {table} failed: {e}")
            raise GatewayError("select", str(e)) from e

    async def insert(self, table: str, row: dict) -> dict:
        tbl = self._table("insert", table)

        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(insert(tbl).values(**row))
                row_id = result.inserted_primary_key[0]
                created = await conn.execute(select(tbl).where(tbl.c.id == row_id))
                return dict(created.one()._mapping)
        except SQLAlchemyError as e:
            logger.error(f"insert into {table} failed: {e}")
            raise GatewayError("insert", str(e)) from e

    async def update(self, table: str, id: str, patch: dict) -> None:
        tbl = self._table("update", table)

        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(
                    update(tbl).where(tbl.c.id == id).values(**patch)
                )
        except SQLAlchemyError as e:
            logger.error(f"update of {table}/{id} failed: {e}")
            raise GatewayError("update", str(e)) from e

        if result.rowcount == 0:
            raise GatewayError("update", f"No row in {table} with id '{id}'")

    async def delete(self, table: str, id: str) -> None:
        tbl = self._table("delete", table)

        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(delete(tbl).where(tbl.c.id == id))
        except SQLAlchemyError as e:
            logger.error(f"delete of {table}/{id} failed: {e}")
            raise GatewayError("delete", str(e)) from e

        if result.rowcount == 0:
            raise GatewayError("delete", f"No row in {table} with id '{id}'")
