"""Product data providers behind a single resolve interface."""

import logging
from dataclasses import dataclass, field, replace
from typing import Protocol, runtime_checkable

from rawscan.adapters.fdc_client import FdcClient
from rawscan.adapters.off_client import OpenFoodFactsClient
from rawscan.domain.products import Product, ProviderSearchResult
from rawscan.errors import ProviderRateLimited
from rawscan.services.local_catalog import LOCAL_PRODUCTS
from rawscan.services.normalization import map_fdc_food, map_off_product
from rawscan.services.throttle import RequestThrottle

_logger = logging.getLogger(__name__)


class ProductProvider(Protocol):
    """An external nutrition data source."""

    name: str

    async def resolve(self, barcode: str) -> Product | None:
        """Return a normalized product, or None when the provider has no match."""


@runtime_checkable
class SearchableProvider(Protocol):
    """A provider that also supports free-text search."""

    name: str

    async def search(self, query: str, limit: int) -> ProviderSearchResult:
        """Return normalized products matching a free-text query."""


def gtin_key(barcode: str) -> str:
    """Return the barcode without leading zeros, so UPC-A and EAN-13 compare equal."""
    return barcode.lstrip("0") or "0"


def _check_throttle(throttle: RequestThrottle | None, key: str) -> None:
    if throttle is not None and not throttle.acquire(key):
        raise ProviderRateLimited(f"{key} request limit reached")


@dataclass
class UsdaProvider:
    """USDA FoodData Central branded foods, matched by GTIN/UPC."""

    client: FdcClient
    name: str = "usda"
    throttle: RequestThrottle | None = None

    async def resolve(self, barcode: str) -> Product | None:
        """Look up a branded food whose GTIN matches the barcode exactly."""
        _check_throttle(self.throttle, self.name)
        payload = await self.client.search_foods(barcode, page_size=25)
        foods = [food for food in payload.get("foods") or [] if isinstance(food, dict)]
        wanted = gtin_key(barcode)
        match = next(
            (
                food
                for food in foods
                if food.get("gtinUpc") and gtin_key(str(food["gtinUpc"])) == wanted
            ),
            None,
        )
        if match is None:
            _logger.info(
                "USDA has no exact GTIN match",
                extra={"barcode": barcode, "hits": len(foods)},
            )
            return None
        detail = await self.client.get_food(int(match["fdcId"]))
        return map_fdc_food(detail, barcode)

    async def search(self, query: str, limit: int) -> ProviderSearchResult:
        """Search branded and foundation foods; hits without a GTIN are skipped."""
        _check_throttle(self.throttle, f"{self.name}-search")
        payload = await self.client.search_foods(
            query, page_size=limit, data_type="Branded,Foundation"
        )
        products = []
        for food in payload.get("foods") or []:
            gtin = str(food.get("gtinUpc") or "").strip()
            if not gtin.isdigit():
                continue
            products.append(map_fdc_food(food, gtin))
        return ProviderSearchResult(
            products=products, total_count=int(payload.get("totalHits") or 0)
        )


@dataclass
class OpenFoodFactsProvider:
    """Open Food Facts, queried with the 13-digit spelling of the barcode."""

    client: OpenFoodFactsClient
    name: str = "off"
    throttle: RequestThrottle | None = None

    async def resolve(self, barcode: str) -> Product | None:
        """Fetch a product; status != 1 or a 404 is a miss."""
        _check_throttle(self.throttle, self.name)
        payload = await self.client.get_product(barcode.zfill(13))
        if not payload or payload.get("status") != 1:
            return None
        product = payload.get("product")
        if not isinstance(product, dict):
            return None
        return map_off_product(product, barcode)

    async def search(self, query: str, limit: int) -> ProviderSearchResult:
        """Search products by free text."""
        _check_throttle(self.throttle, f"{self.name}-search")
        payload = await self.client.search_products(query, page_size=limit)
        products = []
        for item in payload.get("products") or []:
            code = str(item.get("code") or "").strip()
            if not code.isdigit():
                continue
            products.append(map_off_product(item, code))
        return ProviderSearchResult(
            products=products, total_count=int(payload.get("count") or 0)
        )


@dataclass
class LocalCatalogProvider:
    """Bundled catalog of common grocery products."""

    products: dict[str, Product] = field(default_factory=dict)
    name: str = "local"

    def __post_init__(self) -> None:
        source = self.products.values() if self.products else LOCAL_PRODUCTS
        self.products = {gtin_key(product.barcode): product for product in source}

    async def resolve(self, barcode: str) -> Product | None:
        """Match the barcode regardless of UPC-A/EAN-13 zero padding."""
        product = self.products.get(gtin_key(barcode))
        if product is None:
            return None
        return replace(product, barcode=barcode)
