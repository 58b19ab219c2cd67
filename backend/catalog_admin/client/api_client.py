"""Async HTTP client for the catalog API.

Errors returned by the server surface as ``ApiClientError`` with the
server's ``error`` string untouched. Requests are never retried.
"""

from typing import Any, Dict, List, Optional, Sequence

import httpx
import structlog

from catalog_admin.config import settings
from catalog_admin.core.exceptions import ApiClientError

logger = structlog.get_logger(__name__)


class CatalogApiClient:
    """Thin wrapper over ``httpx.AsyncClient``, one method per endpoint.

    Use as an async context manager, or call :meth:`close` when done::

        async with CatalogApiClient() as client:
            page = await client.list_products(limit=10, skip=0)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root including the version prefix; defaults to
                settings.CATALOG_API_BASE_URL
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests, in-process ASGI)
        """
        self.base_url = (base_url or settings.CATALOG_API_BASE_URL).rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.CLIENT_TIMEOUT_SECONDS,
            transport=transport,
        )
        self.logger = logger.bind(client="catalog_api", base_url=self.base_url)

    async def __aenter__(self) -> "CatalogApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        response = await self._http.request(method, path, **kwargs)

        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except ValueError:
                message = response.text or response.reason_phrase
            self.logger.warning(
                "api_request_failed",
                method=method,
                path=path,
                status=response.status_code,
                error=message,
            )
            raise ApiClientError(message, status_code=response.status_code)

        return response.json()

    # Categories

    async def list_categories(self, limit: int = 10, skip: int = 0) -> Dict[str, Any]:
        return await self._request("GET", "/categories", params={"limit": limit, "skip": skip})

    async def create_category(self, name: str) -> Dict[str, Any]:
        return await self._request("POST", "/categories", json={"name": name})

    async def update_category(self, category_id: int, name: str) -> Dict[str, Any]:
        return await self._request("PUT", f"/categories/{category_id}", json={"name": name})

    async def delete_category(
        self,
        category_id: int,
        transfer_to_category_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = {}
        if transfer_to_category_id is not None:
            params["transferToCategoryId"] = transfer_to_category_id
        return await self._request("DELETE", f"/categories/{category_id}", params=params)

    # Products

    async def list_products(
        self,
        limit: int = 10,
        skip: int = 0,
        category_ids: Sequence[int] = (),
        q: Optional[str] = None,
        select: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """Fetch one product page.

        ``category_ids`` is sent as a repeated ``categoryId`` parameter.
        """
        params: List[tuple] = [("limit", limit), ("skip", skip)]
        params.extend(("categoryId", category_id) for category_id in category_ids)
        if q:
            params.append(("q", q))
        if select:
            params.append(("select", ",".join(select)))
        return await self._request("GET", "/products", params=params)

    async def get_product(self, product_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/products/{product_id}")

    async def create_product(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/products", json=payload)

    async def update_product(self, product_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/products/{product_id}", json=payload)

    async def delete_product(self, product_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"/products/{product_id}")
