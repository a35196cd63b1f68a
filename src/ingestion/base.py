"""Base protocol for article ingestion."""
from typing import Protocol

from src.record_store.models import ScrapeCandidate


class ArticleIngestor(Protocol):
    """
    Protocol for ingestion services.

    An ingestor turns a batch of scraped candidates into stored articles,
    skipping urls the store already knows.

    Example:
        class CountingIngestor:  # No inheritance needed!
            async def ingest(self, candidates: list[ScrapeCandidate]) -> int:
                return len(candidates)
    """

    async def ingest(self, candidates: list[ScrapeCandidate]) -> int:
        """
        Persist candidates whose url is not stored yet.

        Returns:
            Number of newly added articles

        Raises:
            PersistenceError: If a store operation fails
        """
        ...
