"""Open Food Facts API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

_SEARCH_FIELDS = (
    "code,product_name,brands,categories_tags,ingredients_text,"
    "allergens_tags,additives_tags,nutriments"
)


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts API interactions."""

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Return the raw product payload, or None when the API answers 404."""

    async def search_products(self, query: str, page_size: int) -> dict[str, object]:
        """Search products by free text and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 15
    ) -> "HttpxOpenFoodFactsClient":
        """Create an Open Food Facts client with a managed httpx session."""
        return cls(
            base_url=base_url,
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Fetch a product by barcode."""
        response = await self.http_client.get(
            f"{self.base_url}/product/{barcode}.json",
            headers=self._headers(),
            timeout=self.timeout_seconds,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return response.json()

    async def search_products(self, query: str, page_size: int) -> dict[str, object]:
        """Search products by free text."""
        response = await self.http_client.get(
            f"{self.base_url}/search",
            params={
                "search_terms": query,
                "page_size": page_size,
                "json": 1,
                "fields": _SEARCH_FIELDS,
            },
            headers=self._headers(),
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": "application/json"}
