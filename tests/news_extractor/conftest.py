"""Shared fixtures for news extractor tests."""
from pathlib import Path

import pytest

from src.news_extractor.extractor import HeuristicNewsExtractor
from tests.news_extractor.utils import FIXED_TODAY


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to HTML fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def news_items_html(fixtures_dir: Path) -> str:
    """Load listing page HTML built from .news-item containers."""
    return (fixtures_dir / "listing_news_items.html").read_text(encoding="utf-8")


@pytest.fixture
def links_only_html(fixtures_dir: Path) -> str:
    """Load listing page HTML with bare news links and no article containers."""
    return (fixtures_dir / "listing_links_only.html").read_text(encoding="utf-8")


@pytest.fixture
def extractor() -> HeuristicNewsExtractor:
    """Extractor with a fixed 'today' for deterministic date fallbacks."""
    return HeuristicNewsExtractor(today=lambda: FIXED_TODAY)
