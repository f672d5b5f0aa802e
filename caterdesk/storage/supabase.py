"""
Supabase Gateway

Hosted-backend implementation of the persistence gateway and blob store:
- PostgREST table API (``/rest/v1/{table}``)
- Storage API (``/storage/v1/object/{bucket}/{key}``)

Each call opens its own aiohttp session; timeouts are the transport defaults.
"""

import asyncio
from typing import Any, Optional

import aiohttp
from loguru import logger

from caterdesk.errors import GatewayError
from caterdesk.storage.gateway import Order


def _filter_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class _SupabaseClient:
    """Shared request plumbing for the REST and storage APIs."""

    def __init__(self, url: str, api_key: str):
        if not url or not api_key:
            raise ValueError("Supabase URL and key are required")
        self.url = url.rstrip("/")
        self.api_key = api_key

    def _headers(self, extra: Optional[dict] = None) -> dict:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
        data: Optional[bytes] = None,
        headers: Optional[dict] = None,
    ) -> Any:
        url = f"{self.url}{path}"
        try:
            async with aiohttp.ClientSession() as session:
                async with session.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    data=data,
                    headers=self._headers(headers),
                ) as resp:
                    if resp.status >= 400:
                        error_text = await resp.text()
                        logger.error(f"Supabase {operation} error {resp.status}: {error_text}")
                        raise GatewayError(operation, f"HTTP {resp.status}: {error_text}")

                    if resp.content_type == "application/json":
                        return await resp.json()
                    return await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Supabase {operation} request failed: {e}")
            raise GatewayError(operation, str(e) or type(e).__name__) from e


class SupabaseGateway(_SupabaseClient):
    """PostgREST-backed persistence gateway."""

    async def select(
        self,
        table: str,
        filters: Optional[dict] = None,
        order: Optional[Order] = None,
        columns: Optional[list[str]] = None,
    ) -> list[dict]:
        params = {"select": ",".join(columns) if columns else "*"}
        for key, value in (filters or {}).items():
            params[key] = f"eq.{_filter_value(value)}"
        if order is not None:
            params["order"] = f"{order.column}.{'desc' if order.descending else 'asc'}"

        rows = await self._request("select", "GET", f"/rest/v1/{table}", params=params)
        return rows or []

    async def insert(self, table: str, row: dict) -> dict:
        rows = await self._request(
            "insert",
            "POST",
            f"/rest/v1/{table}",
            json=[row],
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise GatewayError("insert", f"Insert into {table} returned no row")
        return rows[0]

    async def update(self, table: str, id: str, patch: dict) -> None:
        rows = await self._request(
            "update",
            "PATCH",
            f"/rest/v1/{table}",
            params={"id": f"eq.{id}"},
            json=patch,
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise GatewayError("update", f"No row in {table} with id '{id}'")

    async def delete(self, table: str, id: str) -> None:
        rows = await self._request(
            "delete",
            "DELETE",
            f"/rest/v1/{table}",
            params={"id": f"eq.{id}"},
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise GatewayError("delete", f"No row in {table} with id '{id}'")


class SupabaseStorage(_SupabaseClient):
    """Supabase storage buckets."""

    async def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        overwrite: bool = True,
    ) -> None:
        await self._request(
            "upload",
            "POST",
            f"/storage/v1/object/{bucket}/{key}",
            data=data,
            headers={
                "Content-Type": content_type,
                "x-upsert": "true" if overwrite else "false",
                "Cache-Control": "3600",
            },
        )

    def get_public_url(self, bucket: str, key: str) -> str:
        return f"{self.url}/storage/v1/object/public/{bucket}/{key}"
