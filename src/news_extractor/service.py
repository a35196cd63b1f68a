"""Listing page scrape service: fetch the source page, then extract candidates."""
import asyncio

import httpx
from loguru import logger

from src.record_store.base import RecordStore
from src.record_store.models import LogLevel, ScrapeCandidate
from .base import NewsExtractor
from .errors import FetchError
from .extractor import HeuristicNewsExtractor


BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class NewsScrapeService:
    """
    Fetches a news listing page and delegates parsing to an extractor.

    Implements the NewsScraper Protocol. Fetching is kept out of the
    extractor so extraction stays a pure function of the document and the
    network step can be retried on its own.

    Operational log entries written to the store:
    - info    "Starting scheduled scrape..."
    - success "Successfully scraped N articles"
    - error   "Scraping failed: <reason>" (then the FetchError is re-raised)

    Example:
        service = NewsScrapeService(store=store)
        candidates = await service.scrape("https://unik-kediri.ac.id/list-berita")
    """

    def __init__(
        self,
        store: RecordStore,
        extractor: NewsExtractor | None = None,
        timeout: float = 30.0,
        max_retries: int = 1,
        base_backoff: float = 2.0,
        user_agent: str = BROWSER_USER_AGENT,
    ):
        """
        Initialize the scrape service.

        Args:
            store: Record store receiving operational log entries
            extractor: Listing page extractor (default: HeuristicNewsExtractor())
            timeout: HTTP request timeout in seconds
            max_retries: Total fetch attempts (1 = no retry)
            base_backoff: Base for exponential backoff between attempts (2s, 4s, ...)
            user_agent: User-Agent header sent with the request
        """
        self.store = store
        self.extractor = extractor or HeuristicNewsExtractor()
        self.timeout = timeout
        self.max_retries = max(max_retries, 1)
        self.base_backoff = base_backoff
        self.headers = {"User-Agent": user_agent}

    async def scrape(self, source_url: str) -> list[ScrapeCandidate]:
        """
        Fetch the listing page and extract candidates.

        Args:
            source_url: Listing page url

        Returns:
            Extracted candidates (possibly empty)

        Raises:
            FetchError: If the page cannot be fetched
        """
        await self.store.append_log(LogLevel.INFO, "Starting scheduled scrape...")

        try:
            html = await self._fetch_html(source_url)
        except FetchError as e:
            await self.store.append_log(LogLevel.ERROR, f"Scraping failed: {e}")
            raise

        candidates = self.extractor.extract(html, source_url)

        await self.store.append_log(
            LogLevel.SUCCESS, f"Successfully scraped {len(candidates)} articles"
        )
        return candidates

    async def _fetch_html(self, url: str) -> str:
        """
        Fetch HTML with exponential backoff retry logic.

        Returns:
            Response body as text

        Raises:
            FetchError: If all attempts fail
        """
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=self.headers,
        ) as client:
            for attempt in range(1, self.max_retries + 1):
                try:
                    response = await client.get(url)
                    response.raise_for_status()
                    logger.debug(f"Fetched {url}: {len(response.text)} chars")
                    return response.text

                except httpx.HTTPStatusError as e:
                    status = e.response.status_code
                    error = FetchError(
                        url,
                        f"HTTP {status}: {e.response.reason_phrase}",
                        status_code=status,
                    )
                    cause: Exception = e

                except httpx.RequestError as e:
                    error = FetchError(url, f"{type(e).__name__}: {e}")
                    cause = e

                if attempt == self.max_retries:
                    logger.error(
                        f"Failed to fetch {url} after {self.max_retries} attempts: {error}"
                    )
                    raise error from cause

                backoff_time = self.base_backoff**attempt
                logger.warning(
                    f"Attempt {attempt}/{self.max_retries} failed for {url}, "
                    f"retrying in {backoff_time}s: {error}"
                )
                await asyncio.sleep(backoff_time)

        # This line should never be reached, but helps type checker
        raise FetchError(url, f"Failed to fetch {url} after {self.max_retries} attempts")
