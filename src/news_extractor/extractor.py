"""Heuristic extractor for news listing pages."""
from collections.abc import Callable, Sequence
from datetime import date, datetime, timezone

from bs4 import BeautifulSoup, Tag
from loguru import logger

from src.record_store.models import DEFAULT_CATEGORY, ScrapeCandidate
from .dates import parse_published_date
from .errors import ExtractionError
from .strategies import (
    CATEGORY_FIELD,
    DATE_FIELD,
    DEFAULT_CONTAINER_STRATEGIES,
    EXCERPT_FIELD,
    TITLE_FIELD,
    FieldSelector,
    LinkFallbackStrategy,
    SelectorStrategy,
    clean_text,
)
from .urls import normalize_url, site_root


MIN_TITLE_LENGTH = 10
EXCERPT_FALLBACK_LENGTH = 200
FALLBACK_EXCERPT = "No excerpt available"
FALLBACK_CATEGORY = "Berita"


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class HeuristicNewsExtractor:
    """
    Extraction strategy for news listing pages with unknown markup.

    Implements the NewsExtractor Protocol.

    Uses a prioritized selector cascade:
    1. Container strategies (``.news-item``, ``.article-item``, ..., any
       element whose class contains "news" or "article"). The first
       strategy matching at least one element wins; results are never
       merged across strategies.
    2. Per container, each field resolves independently with its own
       fallback (title → first link text, excerpt → container text minus
       title, date → today, category → "Umum").
    3. Link fallback: only when no container strategy matched anything,
       anchors pointing at news paths (``/berita``, ``/news``, ``/artikel``)
       become candidates with fixed excerpt/category/date.

    A candidate is kept only when it has a url and a title longer than
    10 characters (rejects navigation links, icons, empty anchors).

    Example:
        extractor = HeuristicNewsExtractor()
        candidates = extractor.extract(html, "https://unik-kediri.ac.id/list-berita")
    """

    def __init__(
        self,
        container_strategies: Sequence[SelectorStrategy] = DEFAULT_CONTAINER_STRATEGIES,
        fallback_strategy: LinkFallbackStrategy | None = None,
        title_field: FieldSelector = TITLE_FIELD,
        excerpt_field: FieldSelector = EXCERPT_FIELD,
        date_field: FieldSelector = DATE_FIELD,
        category_field: FieldSelector = CATEGORY_FIELD,
        today: Callable[[], date] = _utc_today,
    ):
        """
        Initialize extractor with its strategies.

        Args:
            container_strategies: Container strategies in priority order
            fallback_strategy: Link strategy used when no container matched
            title_field: Title resolver
            excerpt_field: Excerpt resolver
            date_field: Published date text resolver
            category_field: Category resolver
            today: Returns the date used when no date can be parsed
        """
        self.container_strategies = tuple(container_strategies)
        self.fallback_strategy = fallback_strategy or LinkFallbackStrategy()
        self.title_field = title_field
        self.excerpt_field = excerpt_field
        self.date_field = date_field
        self.category_field = category_field
        self.today = today

    def extract(self, html: str, base_url: str) -> list[ScrapeCandidate]:
        """
        Extract candidate articles from listing page HTML.

        Args:
            html: Raw HTML content
            base_url: Url of the listing page (its site root resolves relative links)

        Returns:
            List of ScrapeCandidate in document order

        Raises:
            ValueError: If base_url is not an absolute url
        """
        root = site_root(base_url)
        soup = BeautifulSoup(html, "lxml")

        for strategy in self.container_strategies:
            elements = strategy.match(soup)
            if not elements:
                continue

            logger.debug(
                f"Strategy '{strategy.name}' matched {len(elements)} elements"
            )
            return self._extract_all(elements, root, self._extract_from_container)

        elements = self.fallback_strategy.match(soup)
        logger.info(
            f"No container strategy matched, link fallback found {len(elements)} links"
        )
        return self._extract_all(elements, root, self._extract_from_link)

    def _extract_all(
        self,
        elements: list[Tag],
        root: str,
        extract_one: Callable[[Tag, str], ScrapeCandidate | None],
    ) -> list[ScrapeCandidate]:
        """
        Run a per-element extractor over all elements, skipping failures.

        Returns:
            Accepted candidates
        """
        candidates: list[ScrapeCandidate] = []
        skipped_count = 0

        for i, element in enumerate(elements, 1):
            try:
                candidate = extract_one(element, root)
            except ExtractionError as e:
                skipped_count += 1
                logger.warning(f"Skipping element {i}/{len(elements)}: {e}")
                continue

            if candidate is not None:
                candidates.append(candidate)

        if skipped_count > 0:
            logger.info(f"Skipped {skipped_count} malformed elements")

        logger.info(
            f"Extracted {len(candidates)} candidates from {len(elements)} elements"
        )
        return candidates

    def _extract_from_container(self, element: Tag, root: str) -> ScrapeCandidate | None:
        """
        Build a candidate from an article container.

        Returns:
            ScrapeCandidate, or None when the acceptance filter rejects it

        Raises:
            ExtractionError: If the element's structure cannot be processed
        """
        try:
            first_link = element.find("a")
            link_text = clean_text(first_link) if first_link else ""

            title = self.title_field.field_from(element) or link_text
            href = first_link.get("href") if first_link else None
            url = normalize_url(href if isinstance(href, str) else None, root)

            if not self._is_acceptable(title, url):
                return None

            excerpt = self.excerpt_field.field_from(element)
            if not excerpt:
                excerpt = (
                    clean_text(element).replace(title, "", 1).strip()[:EXCERPT_FALLBACK_LENGTH]
                )

            published_date = (
                parse_published_date(self.date_field.field_from(element))
                or self.today().isoformat()
            )
            category = self.category_field.field_from(element) or DEFAULT_CATEGORY

            return ScrapeCandidate(
                title=title,
                url=url,
                excerpt=excerpt,
                category=category,
                published_date=published_date,
            )
        except (ValueError, TypeError, AttributeError) as e:
            raise ExtractionError(f"{type(e).__name__}: {e}") from e

    def _extract_from_link(self, element: Tag, root: str) -> ScrapeCandidate | None:
        """
        Build a candidate from a bare news link (fallback path).

        Raises:
            ExtractionError: If the link cannot be processed
        """
        try:
            title = clean_text(element)
            href = element.get("href")
            url = normalize_url(href if isinstance(href, str) else None, root)

            if not self._is_acceptable(title, url):
                return None

            return ScrapeCandidate(
                title=title,
                url=url,
                excerpt=FALLBACK_EXCERPT,
                category=FALLBACK_CATEGORY,
                published_date=self.today().isoformat(),
            )
        except (ValueError, TypeError, AttributeError) as e:
            raise ExtractionError(f"{type(e).__name__}: {e}") from e

    @staticmethod
    def _is_acceptable(title: str | None, url: str | None) -> bool:
        """Acceptance filter: non-empty url and a title longer than 10 characters."""
        return bool(title) and bool(url) and len(title) > MIN_TITLE_LENGTH
