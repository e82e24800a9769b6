"""Provider fallback with per-provider timeouts and retries."""

import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

import httpx

from rawscan.domain.products import Product, ProviderSearchResult
from rawscan.errors import (
    ProviderError,
    ProvidersUnavailable,
    ProviderTimeout,
    ResolutionTimeout,
    ValidationError,
)
from rawscan.services.providers import ProductProvider, SearchableProvider

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

MAX_SEARCH_LIMIT = 50

_logger = logging.getLogger(__name__)


def validate_barcode(barcode: str) -> str:
    """Return the trimmed barcode, or raise when it is not a string of digits."""
    cleaned = barcode.strip() if isinstance(barcode, str) else ""
    if not cleaned or not cleaned.isdigit() or not cleaned.isascii():
        raise ValidationError(f"Barcode must be a non-empty string of digits: {barcode!r}")
    return cleaned


def validate_search(query: str, limit: int) -> str:
    """Return the trimmed query, or raise on an empty query or bad limit."""
    cleaned = query.strip() if isinstance(query, str) else ""
    if not cleaned:
        raise ValidationError("Search query is required")
    if not 1 <= limit <= MAX_SEARCH_LIMIT:
        raise ValidationError(f"Search limit must be between 1 and {MAX_SEARCH_LIMIT}")
    return cleaned


@dataclass
class ProviderAggregator:
    """Queries providers in priority order and returns the first complete product."""

    providers: list[ProductProvider]
    timeout_seconds: float = 5.0
    retry_attempts: int = 2
    retry_base_delay_seconds: float = 0.3
    deadline_seconds: float = 20.0

    async def resolve(self, barcode: str) -> Product | None:
        """Resolve a barcode. None means no provider knows the product."""
        cleaned = validate_barcode(barcode)
        try:
            async with asyncio.timeout(self.deadline_seconds):
                return await self._resolve(cleaned)
        except TimeoutError as exc:
            raise ResolutionTimeout(
                f"Resolution of {cleaned} exceeded {self.deadline_seconds}s"
            ) from exc

    async def search(self, query: str, limit: int) -> ProviderSearchResult:
        """Collect up to limit products from searchable providers, in order."""
        cleaned = validate_search(query, limit)
        try:
            async with asyncio.timeout(self.deadline_seconds):
                return await self._search(cleaned, limit)
        except TimeoutError as exc:
            raise ResolutionTimeout(
                f"Search for {cleaned!r} exceeded {self.deadline_seconds}s"
            ) from exc

    async def _resolve(self, barcode: str) -> Product | None:
        failures: dict[str, str] = {}
        for provider in self.providers:
            try:
                product = await self._call_with_retry(
                    partial(provider.resolve, barcode), provider=provider.name
                )
            except ProviderError as exc:
                failures[provider.name] = str(exc)
                continue
            if product is None:
                _logger.info("Provider %s has no product for %s", provider.name, barcode)
                continue
            if not product.is_complete() or product.barcode != barcode:
                _logger.info(
                    "Provider %s returned a partial product for %s",
                    provider.name,
                    barcode,
                )
                continue
            _logger.info("Resolved %s via %s", barcode, provider.name)
            return product

        if self.providers and len(failures) == len(self.providers):
            raise ProvidersUnavailable(failures)
        return None

    async def _search(self, query: str, limit: int) -> ProviderSearchResult:
        searchable = [
            provider
            for provider in self.providers
            if isinstance(provider, SearchableProvider)
        ]
        products: list[Product] = []
        seen: set[str] = set()
        total_count = 0
        failures: dict[str, str] = {}
        for provider in searchable:
            if len(products) >= limit:
                break
            try:
                result = await self._call_with_retry(
                    partial(provider.search, query, limit - len(products)),
                    provider=provider.name,
                )
            except ProviderError as exc:
                failures[provider.name] = str(exc)
                continue
            total_count += result.total_count
            for product in result.products:
                if product.barcode in seen or not product.is_complete():
                    continue
                seen.add(product.barcode)
                products.append(product)
                if len(products) >= limit:
                    break

        if searchable and len(failures) == len(searchable):
            raise ProvidersUnavailable(failures)
        return ProviderSearchResult(products=products, total_count=total_count)

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[object]]", *, provider: str
    ) -> object:
        """Call a provider with a timeout, retrying transient failures only."""
        attempt = 0
        while True:
            try:
                return await asyncio.wait_for(func(), timeout=self.timeout_seconds)
            except Exception as exc:
                error = _as_provider_error(exc, provider)
                attempt += 1
                _logger.warning(
                    "Provider %s failed (attempt %s/%s, status=%s): %s",
                    provider,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    error,
                )
                if not error.transient or attempt > self.retry_attempts:
                    raise error from exc
                await asyncio.sleep(self.retry_base_delay_seconds * 2 ** (attempt - 1))


def _as_provider_error(exc: Exception, provider: str) -> ProviderError:
    """Classify an exception as transient or permanent."""
    if isinstance(exc, ProviderError):
        return exc
    if isinstance(exc, TimeoutError | httpx.TimeoutException):
        return ProviderTimeout(f"{provider} timed out")
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        return ProviderError(
            f"{provider} returned {status_code}",
            transient=status_code >= httpx.codes.INTERNAL_SERVER_ERROR,
        )
    if isinstance(exc, httpx.TransportError):
        return ProviderError(f"{provider} unreachable: {exc}", transient=True)
    return ProviderError(f"{provider} sent an unusable response: {exc!r}")


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
