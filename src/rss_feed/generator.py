"""RSS 2.0 feed rendering for stored articles."""
from collections.abc import Callable
from datetime import datetime, timezone
from email.utils import format_datetime
from html import escape

from loguru import logger
from lxml import etree

from config.settings import DEFAULT_SOURCE_URL
from src.record_store.base import RecordStore
from src.record_store.errors import PersistenceError
from src.record_store.models import DEFAULT_CATEGORY, Article, LogLevel


CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
DC_NS = "http://purl.org/dc/elements/1.1/"
ATOM_NS = "http://www.w3.org/2005/Atom"
NSMAP = {"content": CONTENT_NS, "dc": DC_NS, "atom": ATOM_NS}

FEED_ARTICLE_LIMIT = 50
FEED_TTL_MINUTES = 60
FEED_TITLE = "UNIK Kediri News Feed"
FEED_DESCRIPTION = "Latest news from Universitas Kadiri (UNIK) - Auto-generated RSS feed"
FEED_LANGUAGE = "id-ID"
FEED_GENERATOR = "UNIK RSS Feed Generator"
FEED_CREATOR = "UNIK Kediri"
WEBMASTER = "webmaster@unik-kediri.ac.id"
SITE_URL = "https://unik-kediri.ac.id"
NO_DESCRIPTION = "No description available"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _rfc822(moment: datetime) -> str:
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def _sub(parent: etree._Element, tag: str, text: str | None = None, **attrib: str) -> etree._Element:
    element = etree.SubElement(parent, tag, attrib)
    if text is not None:
        element.text = text
    return element


class RssFeedGenerator:
    """
    Renders the newest stored articles as an RSS 2.0 document.

    Every render is recorded in the operational log ("RSS feed generated
    successfully" or "RSS generation failed: <reason>").

    Example:
        generator = RssFeedGenerator(store, feed_url="http://localhost:5000/rss.xml")
        xml_bytes = await generator.generate()
    """

    def __init__(
        self,
        store: RecordStore,
        feed_url: str = "http://localhost:5000/rss.xml",
        channel_link: str = DEFAULT_SOURCE_URL,
        limit: int = FEED_ARTICLE_LIMIT,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Initialize the generator.

        Args:
            store: Record store holding articles
            feed_url: Public url of the feed itself (atom self link)
            channel_link: Listing page the feed republishes
            limit: Maximum number of items rendered
            clock: Returns the current tz-aware time (lastBuildDate)
        """
        self.store = store
        self.feed_url = feed_url
        self.channel_link = channel_link
        self.limit = limit
        self._clock = clock

    async def generate(self) -> bytes:
        """
        Render the feed.

        Returns:
            UTF-8 encoded XML document

        Raises:
            PersistenceError: If articles cannot be read
            ValueError: If an article holds text lxml refuses to serialize
        """
        try:
            articles = await self.store.list_articles(self.limit)
            document = self.render(articles)
        except (PersistenceError, ValueError) as e:
            logger.error(f"RSS generation failed: {e}")
            await self.store.append_log(LogLevel.ERROR, f"RSS generation failed: {e}")
            raise

        await self.store.append_log(LogLevel.INFO, "RSS feed generated successfully")
        logger.debug(f"RSS feed rendered with {len(articles)} items")
        return document

    def render(self, articles: list[Article]) -> bytes:
        """Serialize articles (already newest first) into an RSS document."""
        rss = etree.Element("rss", {"version": "2.0"}, nsmap=NSMAP)
        channel = _sub(rss, "channel")

        _sub(channel, "title", FEED_TITLE)
        _sub(channel, "link", self.channel_link)
        _sub(channel, "description", FEED_DESCRIPTION)
        _sub(channel, "language", FEED_LANGUAGE)
        _sub(channel, "lastBuildDate", _rfc822(self._clock()))
        _sub(channel, "generator", FEED_GENERATOR)
        _sub(channel, "managingEditor", WEBMASTER)
        _sub(channel, "webMaster", WEBMASTER)
        _sub(channel, "ttl", str(FEED_TTL_MINUTES))
        _sub(
            channel,
            f"{{{ATOM_NS}}}link",
            href=self.feed_url,
            rel="self",
            type="application/rss+xml",
        )

        image = _sub(channel, "image")
        _sub(image, "url", f"{SITE_URL}/favicon.ico")
        _sub(image, "title", FEED_CREATOR)
        _sub(image, "link", SITE_URL)
        _sub(image, "width", "32")
        _sub(image, "height", "32")

        for article in articles:
            self._append_item(channel, article)

        return etree.tostring(rss, xml_declaration=True, encoding="UTF-8", pretty_print=True)

    def _append_item(self, channel: etree._Element, article: Article) -> None:
        description = article.excerpt or NO_DESCRIPTION
        category = article.category or DEFAULT_CATEGORY

        item = _sub(channel, "item")
        _sub(item, "title", article.title)
        _sub(item, "link", article.url)
        _sub(item, "description", description)
        _sub(item, "pubDate", _rfc822(article.scraped_at))
        _sub(item, "guid", article.url, isPermaLink="true")
        _sub(item, "category", category)
        _sub(item, f"{{{DC_NS}}}creator", FEED_CREATOR)

        encoded = _sub(item, f"{{{CONTENT_NS}}}encoded")
        encoded.text = etree.CDATA(
            "<div>"
            f"<h3>{escape(article.title)}</h3>"
            f"<p>{escape(description)}</p>"
            f"<p><strong>Kategori:</strong> {escape(category)}</p>"
            f'<p><a href="{escape(article.url)}" target="_blank">'
            "Baca selengkapnya di situs UNIK Kediri</a></p>"
            "</div>"
        )
