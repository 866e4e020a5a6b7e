"""Feed fetcher: one HTTP GET per feed source."""

import asyncio
import time
from typing import Optional

import aiohttp
import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .interfaces import FetchedFeed, FetcherInterface, FetchOptions
from ..config.settings import settings
from ..errors import FetchError

logger = structlog.get_logger()

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class FeedFetcher(FetcherInterface):
    """Async feed fetcher sharing one session for the whole run."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        user_agent: str = None,
        timeout_seconds: Optional[float] = None,
        max_retries: int = None,
    ):
        self.session = session
        self._owns_session = session is None
        self.user_agent = user_agent or settings.user_agent
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.fetch_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.fetch_max_retries

    async def __aenter__(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(headers={"User-Agent": self.user_agent})
        return self

    async def __aexit__(self, *args):
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None

    async def fetch(self, url: str, options: FetchOptions = None) -> FetchedFeed:
        """Fetch the raw bytes of one feed.

        Raises:
            FetchError: On transport failure or a non-2xx status.
        """
        options = options or FetchOptions()
        start_time = time.time()

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries + 1),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(TRANSPORT_ERRORS),
                reraise=True,
            ):
                with attempt:
                    feed = await self._get(url, options)
        except TRANSPORT_ERRORS as e:
            logger.error("feed_fetch_failed", url=url, error=str(e) or type(e).__name__)
            raise FetchError("network error or invalid URL", url=url) from e

        logger.info(
            "feed_fetched",
            url=url,
            status=feed.status,
            bytes=len(feed.body),
            time_ms=int((time.time() - start_time) * 1000),
        )
        return feed

    async def _get(self, url: str, options: FetchOptions) -> FetchedFeed:
        kwargs = {"allow_redirects": options.allow_redirects}
        if options.headers:
            kwargs["headers"] = options.headers
        if options.proxy:
            kwargs["proxy"] = options.proxy

        timeout = options.timeout if options.timeout is not None else self.timeout_seconds
        if timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        async with self.session.get(url, **kwargs) as response:
            if not 200 <= response.status < 300:
                logger.error("feed_http_error", url=url, status=response.status)
                raise FetchError(
                    f"HTTP {response.status} {response.reason or ''}".rstrip(),
                    url=url,
                    status=response.status,
                )
            body = await response.read()
            return FetchedFeed(
                url=url,
                body=body,
                status=response.status,
                content_type=response.headers.get("Content-Type", ""),
            )
