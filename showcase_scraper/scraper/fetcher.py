"""Single-request HTTP fetcher built on aiohttp.

One call to ``Fetcher.fetch`` is exactly one GET. Outcomes other than a 2xx
response are raised as ``NetworkError`` variants; retry policy lives in
``retry.with_retry``.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import aiohttp

from showcase_scraper.utils import get_logger

from .exceptions import ConnectionFailedError, HttpStatusError, RequestTimeoutError

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchResponse:
    """Status and decoded body of a successful request."""
    url: str
    status: int
    body: str


class Fetcher:
    """Performs GET requests with a fixed User-Agent and timeout.

    The aiohttp session is created lazily and closed by ``close()`` or on
    leaving ``async with``. An injected session is never closed here.

    Example:
        >>> async with Fetcher(user_agent="...", timeout=10) as fetcher:
        ...     response = await fetcher.fetch("https://ethglobal.com/showcase?page=1")
    """

    def __init__(
        self,
        user_agent: str,
        timeout: float,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the fetcher.

        Args:
            user_agent: Value of the User-Agent header
            timeout: Total per-request timeout in seconds
            session: Optional externally managed session
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.user_agent = user_agent
        self.timeout = timeout
        self.headers = {'User-Agent': user_agent}
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "Fetcher":
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def fetch(self, url: str) -> FetchResponse:
        """Fetch one URL.

        Args:
            url: Absolute URL to GET

        Returns:
            FetchResponse for a 2xx answer

        Raises:
            ValueError: If url is empty
            RequestTimeoutError: If the request exceeded the timeout
            HttpStatusError: If the server answered with a non-2xx status
            ConnectionFailedError: On any other transport failure
        """
        if not url:
            raise ValueError("url must not be empty")

        session = self._ensure_session()
        logger.debug(f"GET {url}")

        try:
            async with session.get(
                url,
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if not 200 <= response.status < 300:
                    raise HttpStatusError(url, response.status)
                body = await response.text(errors='replace')
                return FetchResponse(url=url, status=response.status, body=body)

        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(url, self.timeout) from e
        except aiohttp.ClientError as e:
            raise ConnectionFailedError(url, str(e) or type(e).__name__) from e

    async def close(self) -> None:
        """Close the session if this fetcher created it."""
        if self._owns_session and self._session is not None:
            if not self._session.closed:
                await self._session.close()
            self._session = None
