"""Error taxonomy for product resolution and scoring."""


class RawScanError(Exception):
    """Base class for errors raised by the scoring core."""


class ValidationError(RawScanError):
    """Malformed barcode or query input. Never retried."""


class ProviderError(RawScanError):
    """A single provider failed to answer."""

    def __init__(self, message: str, *, transient: bool = False) -> None:
        super().__init__(message)
        self.transient = transient


class ProviderTimeout(ProviderError):
    """A provider call exceeded its per-attempt timeout."""

    def __init__(self, message: str) -> None:
        super().__init__(message, transient=True)


class ProvidersUnavailable(ProviderError):
    """Every configured provider failed for one request."""

    def __init__(self, failures: dict[str, str]) -> None:
        detail = "; ".join(f"{name}: {reason}" for name, reason in failures.items())
        super().__init__(f"All providers failed ({detail})")
        self.failures = failures


class ProviderRateLimited(ProviderError):
    """A provider was skipped because its request window is full."""


class ResolutionTimeout(RawScanError):
    """The overall resolution deadline elapsed before any provider answered."""


class PersistenceError(RawScanError):
    """A cache or score store read/write failed."""


class ScoreComputationError(RawScanError):
    """A malformed rule or an out-of-range score."""
