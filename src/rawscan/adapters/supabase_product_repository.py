"""Supabase implementation of the product cache storage."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from rawscan.domain.products import CachedProduct, Nutriments, Product
from rawscan.services.product_cache import ProductRepository


@dataclass
class SupabaseProductRepository(ProductRepository):
    """Supabase-backed repository over the items table."""

    client: Client

    def get_by_barcode(self, barcode: str) -> CachedProduct | None:
        """Return the stored product for a barcode, if present."""
        response = (
            self.client.table("items")
            .select("*")
            .eq("barcode", barcode)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def upsert(self, product: Product) -> CachedProduct:
        """Insert or overwrite the row for the product's barcode."""
        response = (
            self.client.table("items")
            .upsert(_item_payload(product), on_conflict="barcode")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to upsert item")
        return _parse_item(response.data[0])

    def list_by_category(
        self, category: str, exclude_barcode: str, limit: int, offset: int = 0
    ) -> list[CachedProduct]:
        """Return one page of stored products in a category, ordered by barcode."""
        response = (
            self.client.table("items")
            .select("*")
            .eq("category", category)
            .neq("barcode", exclude_barcode)
            .order("barcode")
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]


def _item_payload(product: Product) -> dict[str, object]:
    return {
        "barcode": product.barcode,
        "name": product.name,
        "brand": product.brand,
        "category": product.category,
        "ingredients": product.ingredients,
        "nutrition": {
            "per_100g": product.nutriments.to_dict(),
            "allergens": sorted(product.allergens),
            "additives": sorted(product.additives),
            "source": product.source,
        },
        "created_at": datetime.now(tz=UTC).isoformat(),
    }


def _parse_item(row: dict[str, object]) -> CachedProduct:
    """Parse an items row into a cached product."""
    nutrition = row.get("nutrition") or {}
    created_raw = row.get("created_at")
    cached_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.now(tz=UTC)
    )
    if cached_at.tzinfo is None:
        cached_at = cached_at.replace(tzinfo=UTC)
    product = Product(
        barcode=str(row["barcode"]),
        name=str(row.get("name", "")),
        brand=row.get("brand"),
        category=str(row.get("category", "")),
        ingredients=str(row.get("ingredients") or ""),
        nutriments=Nutriments.from_dict(nutrition.get("per_100g") or {}),
        allergens=frozenset(nutrition.get("allergens") or []),
        additives=frozenset(nutrition.get("additives") or []),
        source=str(nutrition.get("source") or "unknown"),
    )
    return CachedProduct(item_id=UUID(str(row["id"])), product=product, cached_at=cached_at)
