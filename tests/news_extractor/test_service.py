"""Tests for NewsScrapeService."""
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from src.news_extractor.errors import FetchError
from src.news_extractor.service import NewsScrapeService
from src.record_store.models import LogLevel
from tests.news_extractor.utils import LISTING_URL


def _status_error(status_code: int, reason: str) -> httpx.HTTPStatusError:
    response = Mock()
    response.status_code = status_code
    response.reason_phrase = reason
    return httpx.HTTPStatusError(
        message=f"{status_code} {reason}", request=Mock(), response=response
    )


def _ok_response(html: str) -> Mock:
    response = Mock()
    response.text = html
    response.status_code = 200
    response.raise_for_status = Mock()
    return response


class TestScrapeHappyPath:
    """Successful fetch followed by extraction."""

    @patch("src.news_extractor.service.httpx.AsyncClient")
    async def test_scrape_returns_candidates_and_logs(
        self, mock_async_client_class, memory_store, extractor, news_items_html
    ):
        """
        Given: the listing page responds with HTML
        When: scrape() is called
        Then: candidates are returned and start/success entries are logged
        """
        # Given: Mock successful HTTP response
        mock_client = Mock()
        mock_async_client_class.return_value.__aenter__.return_value = mock_client
        mock_client.get = AsyncMock(return_value=_ok_response(news_items_html))

        # When: Scraping
        service = NewsScrapeService(memory_store, extractor=extractor)
        candidates = await service.scrape(LISTING_URL)

        # Then: extractor output is returned
        assert len(candidates) == 3
        mock_client.get.assert_awaited_once_with(LISTING_URL)

        # Then: operational log has start and success entries (newest first)
        logs = await memory_store.list_logs()
        assert [(e.level, e.message) for e in logs] == [
            (LogLevel.SUCCESS, "Successfully scraped 3 articles"),
            (LogLevel.INFO, "Starting scheduled scrape..."),
        ]

    @patch("src.news_extractor.service.httpx.AsyncClient")
    async def test_client_configured_with_browser_headers(
        self, mock_async_client_class, memory_store, extractor
    ):
        # Given: Mock client
        mock_client = Mock()
        mock_async_client_class.return_value.__aenter__.return_value = mock_client
        mock_client.get = AsyncMock(return_value=_ok_response("<html></html>"))

        # When: Scraping
        await NewsScrapeService(memory_store, extractor=extractor).scrape(LISTING_URL)

        # Then: timeout, redirects, and User-Agent are set
        kwargs = mock_async_client_class.call_args.kwargs
        assert kwargs["timeout"] == 30.0
        assert kwargs["follow_redirects"] is True
        assert "Mozilla/5.0" in kwargs["headers"]["User-Agent"]


class TestScrapeFailures:
    """Fetch failures and retry behavior."""

    @patch("asyncio.sleep", new_callable=AsyncMock)
    @patch("src.news_extractor.service.httpx.AsyncClient")
    async def test_http_error_raises_fetch_error_without_retry(
        self, mock_async_client_class, mock_sleep, memory_store, extractor
    ):
        """
        Given: the server answers 503
        When: scrape() is called with default settings
        Then: FetchError is raised after one attempt and an error is logged
        """
        # Given: Mock client that returns 503
        mock_client = Mock()
        mock_async_client_class.return_value.__aenter__.return_value = mock_client
        mock_client.get = AsyncMock(side_effect=_status_error(503, "Service Unavailable"))

        # When/Then: FetchError with the status
        service = NewsScrapeService(memory_store, extractor=extractor)
        with pytest.raises(FetchError) as exc_info:
            await service.scrape(LISTING_URL)

        assert exc_info.value.status_code == 503
        assert str(exc_info.value) == "HTTP 503: Service Unavailable"
        assert mock_client.get.call_count == 1
        mock_sleep.assert_not_called()

        # Then: the failure is in the operational log
        latest = (await memory_store.list_logs(1))[0]
        assert latest.level is LogLevel.ERROR
        assert latest.message == "Scraping failed: HTTP 503: Service Unavailable"

    @patch("asyncio.sleep", new_callable=AsyncMock)
    @patch("src.news_extractor.service.httpx.AsyncClient")
    async def test_transport_error_raises_fetch_error(
        self, mock_async_client_class, mock_sleep, memory_store, extractor
    ):
        # Given: Mock client whose request times out
        mock_client = Mock()
        mock_async_client_class.return_value.__aenter__.return_value = mock_client
        mock_client.get = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))

        # When/Then: FetchError without status code
        service = NewsScrapeService(memory_store, extractor=extractor)
        with pytest.raises(FetchError) as exc_info:
            await service.scrape(LISTING_URL)

        assert exc_info.value.status_code is None
        assert "ReadTimeout" in str(exc_info.value)

    @patch("asyncio.sleep", new_callable=AsyncMock)
    @patch("src.news_extractor.service.httpx.AsyncClient")
    async def test_retries_with_exponential_backoff_then_succeeds(
        self, mock_async_client_class, mock_sleep, memory_store, extractor, news_items_html
    ):
        """
        Given: two 502 responses, then success, with max_retries=3
        When: scrape() is called
        Then: it backs off 2s then 4s and returns candidates
        """
        # Given: Mock client failing twice
        mock_client = Mock()
        mock_async_client_class.return_value.__aenter__.return_value = mock_client
        mock_client.get = AsyncMock(
            side_effect=[
                _status_error(502, "Bad Gateway"),
                _status_error(502, "Bad Gateway"),
                _ok_response(news_items_html),
            ]
        )

        # When: Scraping with retries enabled
        service = NewsScrapeService(memory_store, extractor=extractor, max_retries=3)
        candidates = await service.scrape(LISTING_URL)

        # Then: succeeded on the third attempt
        assert len(candidates) == 3
        assert mock_client.get.call_count == 3
        calls = [call[0][0] for call in mock_sleep.call_args_list]
        assert calls == [2.0, 4.0]
