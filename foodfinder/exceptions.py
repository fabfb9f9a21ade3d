"""Exception types for FoodFinder."""


class FoodFinderError(Exception):
    """Base class for all FoodFinder errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProviderError(FoodFinderError):
    """Upstream provider unreachable, non-2xx, or returned a malformed payload."""

    def __init__(
        self, message: str, provider: str | None = None, cause: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.cause = cause


class ProviderTimeoutError(ProviderError):
    """Upstream provider did not answer within the configured timeout."""


class ValidationError(FoodFinderError):
    """Request is malformed (bad id, coordinates out of range, ...)."""


class NotFoundError(FoodFinderError):
    """Upstream reports no result for the requested id."""
