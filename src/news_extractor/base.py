"""Base protocols for listing-page extraction strategies."""
from typing import Protocol

from bs4 import BeautifulSoup, Tag

from src.record_store.models import ScrapeCandidate


class ElementStrategy(Protocol):
    """
    Protocol for strategies that locate article containers in a document.

    Strategies are tried in priority order; the extractor uses the first one
    whose ``match`` returns at least one element and never merges results
    across strategies (overlapping selectors would yield duplicates).

    Example:
        class DivNewsStrategy:  # No inheritance needed!
            name = "div.news"

            def match(self, soup: BeautifulSoup) -> list[Tag]:
                return soup.select("div.news")
    """

    name: str

    def match(self, soup: BeautifulSoup) -> list[Tag]:
        """Return matching elements in document order (may be empty)."""
        ...


class FieldStrategy(Protocol):
    """
    Protocol for resolving one field (title, excerpt, date, ...) from an element.

    Each field resolves independently and tolerantly: a missing sub-element
    yields None and the caller applies its own fallback.
    """

    def field_from(self, element: Tag) -> str | None:
        """Return the field text for this element, or None if not found."""
        ...


class NewsExtractor(Protocol):
    """
    Protocol for listing-page extractors.

    ``extract`` is a pure function of the document: fetching is a separate
    step (see NewsScrapeService).
    """

    def extract(self, html: str, base_url: str) -> list[ScrapeCandidate]:
        """
        Extract candidate article records from listing page HTML.

        Args:
            html: Raw HTML of the listing page
            base_url: Url the page was fetched from (used to resolve links)

        Returns:
            Candidates in document order (possibly empty)
        """
        ...


class NewsScraper(Protocol):
    """
    Protocol for fetch-and-extract services consumed by the scheduler.

    Example:
        class StaticScraper:  # No inheritance needed!
            async def scrape(self, source_url: str) -> list[ScrapeCandidate]:
                return [ScrapeCandidate(title="...", url="https://...")]
    """

    async def scrape(self, source_url: str) -> list[ScrapeCandidate]:
        """
        Fetch the listing page and extract candidates.

        Raises:
            FetchError: If the page cannot be fetched (non-2xx or transport error)
        """
        ...
