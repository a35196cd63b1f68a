"""Selector strategies for locating articles and their fields on listing pages."""
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from src.record_store.models import strip_xml_invalid


def clean_text(element: Tag) -> str:
    """Return the element's text with whitespace collapsed and XML-invalid characters removed."""
    return " ".join(strip_xml_invalid(element.get_text(" ")).split())


@dataclass(frozen=True)
class SelectorStrategy:
    """
    Locate article containers with a single CSS selector.

    Implements the ElementStrategy Protocol.
    """

    name: str
    selector: str

    def match(self, soup: BeautifulSoup) -> list[Tag]:
        return soup.select(self.selector)


@dataclass(frozen=True)
class LinkFallbackStrategy:
    """
    Locate bare news links when no container strategy matched.

    Matches anchors whose href contains one of the news path fragments
    (e.g. ``/berita/55``). Implements the ElementStrategy Protocol.
    """

    name: str = "news-link-fallback"
    path_fragments: tuple[str, ...] = ("/berita", "/news", "/artikel")

    def match(self, soup: BeautifulSoup) -> list[Tag]:
        selector = ", ".join(f'a[href*="{fragment}"]' for fragment in self.path_fragments)
        return soup.select(selector)


@dataclass(frozen=True)
class FieldSelector:
    """
    Resolve a text field from the first non-empty sub-element.

    Selectors are tried in priority order; within one selector, matches are
    tried in document order. Implements the FieldStrategy Protocol.
    """

    selectors: tuple[str, ...]

    def field_from(self, element: Tag) -> str | None:
        for selector in self.selectors:
            for match in element.select(selector):
                text = clean_text(match)
                if text:
                    return text
        return None


# Article containers, most specific first
DEFAULT_CONTAINER_STRATEGIES: tuple[SelectorStrategy, ...] = (
    SelectorStrategy("news-item", ".news-item"),
    SelectorStrategy("article-item", ".article-item"),
    SelectorStrategy("post-item", ".post-item"),
    SelectorStrategy("content-item", ".content-item"),
    SelectorStrategy("article-tag", "article"),
    SelectorStrategy("card", ".card"),
    SelectorStrategy("class-contains-news", '[class*="news"]'),
    SelectorStrategy("class-contains-article", '[class*="article"]'),
)

TITLE_FIELD = FieldSelector(
    ("h1", "h2", "h3", "h4", ".title", '[class*="title"]', '[class*="headline"]')
)
EXCERPT_FIELD = FieldSelector((".excerpt", ".description", ".summary", "p"))
DATE_FIELD = FieldSelector((".date", ".published", '[class*="date"]', "time"))
CATEGORY_FIELD = FieldSelector((".category", ".tag", '[class*="category"]'))
