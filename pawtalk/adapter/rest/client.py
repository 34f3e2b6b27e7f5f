"""PostgREST client.

Thin wrapper over ``httpx.AsyncClient`` for a PostgREST-style backing
store: tables under ``/rest/v1/<table>``, stored procedures under
``/rest/v1/rpc/<name>``, filters as query parameters (``id=eq.<uuid>``).
"""

from typing import Any

import httpx
import logfire

from pawtalk.adapter.error import BackendError
from pawtalk.config import BackendSettings


def create_http_client(settings: BackendSettings) -> httpx.AsyncClient:
    """Build the shared HTTP client with the API key headers set."""
    return httpx.AsyncClient(
        base_url=settings.rest_url,
        headers={
            "apikey": settings.api_key,
            "Authorization": f"Bearer {settings.api_key}",
        },
        timeout=settings.timeout,
    )


def in_list(values) -> str:
    """Format an ``in.(...)`` filter value."""
    return "in.(" + ",".join(str(v) for v in values) + ")"


class PostgrestClient:
    """Table and procedure calls against a PostgREST service."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        """Initialize client.

        Args:
            http: Shared HTTP client, already pointed at the REST base URL
        """
        self.http = http

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request and fail on any non-2xx status.

        Raises:
            BackendError: On transport errors and error responses
        """
        try:
            response = await self.http.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logfire.error("Backend request failed", method=method, path=path, error=str(e))
            raise BackendError(f"HTTP error calling {path}: {e}") from e

        if response.is_error:
            logfire.error(
                "Backend returned an error",
                method=method,
                path=path,
                status_code=response.status_code,
                error=response.text,
            )
            raise BackendError(
                f"{method} {path} failed: {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def select(self, table: str, params: dict[str, Any]) -> list[dict]:
        response = await self.request("GET", f"/{table}", params=params)
        return response.json()

    async def insert(self, table: str, row: dict[str, Any], returning: bool = False):
        prefer = "return=representation" if returning else "return=minimal"
        response = await self.request(
            "POST", f"/{table}", json=row, headers={"Prefer": prefer}
        )
        if returning:
            rows = response.json()
            if not rows:
                raise BackendError(f"Insert into {table} returned no row")
            return rows[0]
        return None

    async def update(
        self,
        table: str,
        filters: dict[str, Any],
        values: dict[str, Any],
        returning: bool = False,
    ):
        prefer = "return=representation" if returning else "return=minimal"
        response = await self.request(
            "PATCH", f"/{table}", params=filters, json=values, headers={"Prefer": prefer}
        )
        if returning:
            rows = response.json()
            if not rows:
                raise BackendError(f"Update of {table} matched no row", status_code=404)
            return rows[0]
        return None

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        await self.request("DELETE", f"/{table}", params=filters)

    async def rpc(self, name: str, args: dict[str, Any]) -> Any:
        response = await self.request("POST", f"/rpc/{name}", json=args)
        return response.json() if response.content else None
