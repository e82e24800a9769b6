"""Persisted product cache with single-flight resolution per barcode."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

from rawscan.domain.products import CachedProduct, Product
from rawscan.errors import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

_logger = logging.getLogger(__name__)


class ProductRepository(Protocol):
    """Persistence interface for resolved products."""

    def get_by_barcode(self, barcode: str) -> CachedProduct | None:
        """Return the stored product for a barcode, if present."""

    def upsert(self, product: Product) -> CachedProduct:
        """Insert or fully overwrite the product stored for its barcode."""

    def list_by_category(
        self, category: str, exclude_barcode: str, limit: int, offset: int = 0
    ) -> list[CachedProduct]:
        """Return one page of stored products in a category, ordered by barcode."""


@dataclass
class _InFlight:
    task: "asyncio.Task[CachedProduct | None]"
    waiters: int = 0


@dataclass
class ProductCache:
    """Reads and writes resolved products and coalesces concurrent misses."""

    repository: ProductRepository
    ttl_seconds: int | None = None
    _in_flight: dict[str, _InFlight] = field(default_factory=dict, repr=False)

    def get(self, barcode: str) -> CachedProduct | None:
        """Return a fresh cached product, or None on a miss."""
        try:
            cached = self.repository.get_by_barcode(barcode)
        except Exception as exc:
            _logger.exception("Product cache read failed", extra={"barcode": barcode})
            raise PersistenceError(f"Product cache read failed: {exc}") from exc
        if cached is None or self._is_stale(cached):
            return None
        return cached

    def put(self, product: Product) -> CachedProduct:
        """Store a product, overwriting any earlier resolution."""
        try:
            return self.repository.upsert(product)
        except Exception as exc:
            _logger.exception(
                "Product cache write failed", extra={"barcode": product.barcode}
            )
            raise PersistenceError(f"Product cache write failed: {exc}") from exc

    def remember(self, products: "Iterable[Product]") -> None:
        """Store products that are not cached yet, leaving cached ones untouched."""
        for product in products:
            if self.get(product.barcode) is None:
                self.put(product)

    def candidates(
        self, category: str, exclude_barcode: str, page_size: int = 100
    ) -> list[CachedProduct]:
        """Return every cached product sharing a category, read page by page."""
        found: list[CachedProduct] = []
        offset = 0
        while True:
            try:
                page = self.repository.list_by_category(
                    category, exclude_barcode, page_size, offset=offset
                )
            except Exception as exc:
                _logger.exception(
                    "Product cache category scan failed", extra={"category": category}
                )
                raise PersistenceError(f"Product cache read failed: {exc}") from exc
            found.extend(page)
            if len(page) < page_size:
                return found
            offset += page_size

    def in_flight(self, barcode: str) -> int:
        """Return how many callers are waiting on a resolution of the barcode."""
        entry = self._in_flight.get(barcode)
        return entry.waiters if entry else 0

    async def get_or_resolve(
        self,
        barcode: str,
        resolver: "Callable[[str], Awaitable[Product | None]]",
    ) -> tuple[CachedProduct | None, bool]:
        """Return (product, from_cache), resolving at most once per barcode.

        Concurrent callers for the same uncached barcode share one resolution.
        A caller that is cancelled stops waiting, but the shared resolution
        keeps running for the others and still writes its result.
        """
        cached = self.get(barcode)
        if cached is not None:
            return cached, True

        entry = self._in_flight.get(barcode)
        if entry is None:
            task = asyncio.create_task(self._resolve_and_store(barcode, resolver))
            entry = _InFlight(task=task)
            self._in_flight[barcode] = entry
            task.add_done_callback(lambda done: self._release(barcode, done))
        entry.waiters += 1
        try:
            return await asyncio.shield(entry.task), False
        finally:
            entry.waiters -= 1

    async def _resolve_and_store(
        self,
        barcode: str,
        resolver: "Callable[[str], Awaitable[Product | None]]",
    ) -> CachedProduct | None:
        product = await resolver(barcode)
        if product is None:
            return None
        return self.put(product)

    def _release(self, barcode: str, task: "asyncio.Task[CachedProduct | None]") -> None:
        entry = self._in_flight.get(barcode)
        if entry is not None and entry.task is task:
            del self._in_flight[barcode]
        if not task.cancelled():
            # Mark the exception as retrieved when every waiter has gone.
            task.exception()

    def _is_stale(self, cached: CachedProduct) -> bool:
        if self.ttl_seconds is None:
            return False
        age = datetime.now(tz=UTC) - cached.cached_at
        return age >= timedelta(seconds=self.ttl_seconds)
