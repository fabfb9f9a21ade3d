"""Common HTTP plumbing for upstream restaurant providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from foodfinder.exceptions import NotFoundError, ProviderError, ProviderTimeoutError
from foodfinder.models import Location, RawDetail, RawResult

logger = logging.getLogger(__name__)

DEFAULT_RADIUS = 1500
DEFAULT_LIMIT = 20
DEFAULT_TIMEOUT = 8.0


class ProviderClient(ABC):
    """Search/details capability over one upstream provider.

    Subclasses map the provider-agnostic arguments onto the provider's query
    parameters and parse the payload into tagged raw models. Every failure
    surfaces as ``ProviderError`` (or ``NotFoundError`` for unknown ids); no
    retries are attempted here.
    """

    kind: ClassVar[str]
    min_radius: ClassVar[int] = 1
    max_radius: ClassVar[int]

    def __init__(
        self,
        api_key: str | None,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the provider client.

        Args:
            api_key: Provider credential (bearer token or query key)
            timeout: Upstream HTTP timeout in seconds
            client: Optional pre-built HTTP client (tests inject a mock transport)
        """
        self.api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @abstractmethod
    async def search(
        self,
        center: Location,
        radius_m: int | None = None,
        keyword: str | None = None,
        limit: int | None = None,
    ) -> list[RawResult]:
        """Find restaurants around ``center``."""

    @abstractmethod
    async def get_details(self, restaurant_id: str) -> RawDetail:
        """Fetch the full record for one restaurant."""

    def clamp_radius(self, radius_m: int | None) -> int:
        """Clamp a radius to the range accepted by the provider."""
        if radius_m is None:
            return DEFAULT_RADIUS
        return max(self.min_radius, min(int(radius_m), self.max_radius))

    def _require_key(self) -> str:
        if not self.api_key:
            raise ProviderError(
                f"{self.kind} API key is not configured", provider=self.kind
            )
        return self.api_key

    async def _get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        """Issue one GET request and return the successful response.

        Raises:
            ProviderTimeoutError: If the request timed out
            NotFoundError: If the provider answered 404
            ProviderError: On any other transport or status failure
        """
        try:
            response = await self._client.get(
                url,
                params=params,
                headers=headers,
                follow_redirects=follow_redirects,
            )
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                f"{self.kind} request timed out", provider=self.kind, cause=e
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(
                f"{self.kind} request failed: {e}", provider=self.kind, cause=e
            ) from e

        if response.status_code == 404:
            raise NotFoundError(f"{self.kind} has no record at {response.url.path}")

        if not response.is_success:
            raise ProviderError(
                f"{self.kind} returned HTTP {response.status_code}",
                provider=self.kind,
            )

        return response

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Issue one GET request and return the decoded JSON object.

        Raises:
            ProviderTimeoutError: If the request timed out
            NotFoundError: If the provider answered 404
            ProviderError: On any other transport, status or decoding failure
        """
        response = await self._get(url, params=params, headers=headers)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                f"{self.kind} returned a non-JSON body", provider=self.kind, cause=e
            ) from e

        if not isinstance(data, dict):
            raise ProviderError(
                f"{self.kind} returned an unexpected payload", provider=self.kind
            )

        return data

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ProviderClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def parse_records(provider: str, model: type, items: Any) -> list:
    """Validate a list of raw records, skipping the ones that are malformed.

    A record without identity or name cannot be represented at all, so it is
    dropped instead of failing the whole batch.
    """
    if not isinstance(items, list):
        raise ProviderError(
            f"{provider} payload is missing its result list", provider=provider
        )

    records = []
    for item in items:
        try:
            records.append(model.model_validate(item))
        except PydanticValidationError as e:
            logger.debug(
                f"Skipping malformed {provider} record ({e.error_count()} errors)"
            )
    if len(records) < len(items):
        logger.info(
            f"Dropped {len(items) - len(records)} malformed {provider} record(s)"
        )
    return records
