"""Tests for url helpers."""
import pytest

from src.news_extractor.urls import normalize_url, site_root


ROOT = "https://unik-kediri.ac.id"


class TestSiteRoot:
    def test_strips_path_and_query(self):
        assert site_root("https://unik-kediri.ac.id/list-berita?page=2") == ROOT

    def test_keeps_port(self):
        assert site_root("http://localhost:8080/berita") == "http://localhost:8080"

    @pytest.mark.parametrize("url", ["", "   ", "unik-kediri.ac.id/list-berita", "https://"])
    def test_invalid_base_url_raises_value_error(self, url):
        with pytest.raises(ValueError):
            site_root(url)


class TestNormalizeUrl:
    @pytest.mark.parametrize(
        "href,expected",
        [
            ("https://other.example/berita/1", "https://other.example/berita/1"),
            ("http://unik-kediri.ac.id/berita/2", "http://unik-kediri.ac.id/berita/2"),
            ("/berita/123", "https://unik-kediri.ac.id/berita/123"),
            ("berita/124", "https://unik-kediri.ac.id/berita/124"),
            ("//cdn.unik-kediri.ac.id/berita/3", "https://cdn.unik-kediri.ac.id/berita/3"),
            ("  /berita/5  ", "https://unik-kediri.ac.id/berita/5"),
        ],
    )
    def test_resolves_against_root(self, href, expected):
        assert normalize_url(href, ROOT) == expected

    @pytest.mark.parametrize("href", [None, "", "   "])
    def test_missing_href_yields_none(self, href):
        assert normalize_url(href, ROOT) is None
