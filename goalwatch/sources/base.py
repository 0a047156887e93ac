from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from goalwatch.models.league import AvailableLeague
from goalwatch.models.raw import RawMatch
from goalwatch.models.scope import MatchScope

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

# How much of an error body ends up in the logs
MAX_LOGGED_BODY = 500


class SourceError(Exception):
    """Custom exception for upstream data source errors."""

    pass


class UpstreamStatusError(SourceError):
    """The upstream answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str = "", url: str = ""):
        self.status_code = status_code
        self.body = body[:MAX_LOGGED_BODY]
        self.url = url
        super().__init__(f"HTTP {status_code} from {url}")


class RateLimitError(UpstreamStatusError):
    """Exception raised for rate limit errors (429)."""

    pass


class UpstreamPayloadError(SourceError):
    """The upstream body is not JSON or does not have the documented shape."""

    pass


class _RetryableStatus(Exception):
    """Internal marker so tenacity retries 5xx/429 but nothing else."""

    def __init__(self, error: UpstreamStatusError):
        self.error = error
        super().__init__(str(error))


class BaseAPIClient:
    """Shared HTTP plumbing for the upstream JSON APIs."""

    provider: str = "unknown"

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        max_attempts: int = 1,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max(1, max_attempts)
        self.client = client or httpx.AsyncClient(
            follow_redirects=True,
            headers={"Accept": "application/json", "User-Agent": "goalwatch/1.0"},
        )

    async def _send(self, url: str, params: Optional[Dict[str, Any]]) -> httpx.Response:
        logger.debug(f"GET {url}", provider=self.provider, params=params)
        response = await self.client.get(url, params=params)

        if response.is_success:
            logger.debug(f"Request successful: {response.status_code} for {url}")
            return response

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            logger.warning(
                f"Rate limit hit (429) for {self.provider} at {url}. Retry-After: {retry_after}"
            )
            error: UpstreamStatusError = RateLimitError(429, response.text, url)
        else:
            error = UpstreamStatusError(response.status_code, response.text, url)

        if response.status_code in RETRYABLE_STATUS_CODES:
            raise _RetryableStatus(error)
        raise error

    async def _request(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """GET ``path`` below the base URL, retrying up to ``max_attempts`` times.

        Every failure comes out as a SourceError subclass.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type((httpx.TransportError, _RetryableStatus)),
                reraise=True,
            ):
                with attempt:
                    return await self._send(url, params)
        except _RetryableStatus as e:
            raise e.error from None
        except httpx.HTTPError as e:
            raise SourceError(f"Request to {self.provider} failed: {e!r}") from e
        raise SourceError(f"No attempt made for {url}")  # pragma: no cover

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._request(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamPayloadError(
                f"Invalid JSON from {self.provider} at {response.url}: {e}"
            ) from e

    async def close(self) -> None:
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.debug(f"Closed HTTP client for {self.provider}")


class MatchSource(ABC):
    """Where raw match records come from."""

    name: str = "unknown"

    @abstractmethod
    async def fetch_matches(self, scope: MatchScope) -> List[RawMatch]:
        """Fetch the raw matches for a league/season/round.

        Never raises for upstream trouble: failures are logged and an empty
        list is returned.
        """
        pass

    @abstractmethod
    async def fetch_available_leagues(self) -> List[AvailableLeague]:
        pass

    async def close(self) -> None:
        pass


class LogoResolver(ABC):
    """Maps a team display name to a logo URL."""

    name: str = "unknown"

    @abstractmethod
    async def resolve(self, team_name: str) -> Optional[str]:
        """Return a logo URL for ``team_name`` or None. Never raises for upstream trouble."""
        pass

    def reset(self) -> None:
        """Forget anything remembered from the previous render."""
        pass

    async def close(self) -> None:
        pass
