"""Record store models for articles, operational logs, and settings."""
import re
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


MAX_TITLE_LENGTH = 500
MAX_EXCERPT_LENGTH = 1000
DEFAULT_CATEGORY = "Umum"

# Characters outside the XML 1.0 Char production (C0 controls, surrogates, ...)
XML_INVALID_CHARS = re.compile(
    "[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


def strip_xml_invalid(text: str) -> str:
    """Remove characters that cannot appear in an XML document."""
    return XML_INVALID_CHARS.sub("", text)


class LogLevel(str, Enum):
    """Severity of an operational log entry shown on the dashboard."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    SUCCESS = "success"


class ScrapeCandidate(BaseModel):
    """
    Article record extracted from a listing page but not yet persisted.

    Candidates flow from the extractor to the ingestor. The store turns a
    candidate into an Article by assigning ``id`` and ``scraped_at``.

    Workflow Position:
        Fetch → Extract → **ScrapeCandidate** → Ingest → Article

    Title and excerpt are truncated to the storage limits on construction,
    so every candidate (and therefore every stored article) satisfies
    ``len(title) <= 500`` and ``len(excerpt) <= 1000``.
    """

    title: str
    url: str
    excerpt: str | None = None
    category: str | None = DEFAULT_CATEGORY
    published_date: str | None = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate that title is not empty and truncate to the storage limit."""
        v = strip_xml_invalid(v)
        if not v or not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()[:MAX_TITLE_LENGTH]

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate that url is not empty and has basic URL structure."""
        v = strip_xml_invalid(v)
        if not v or not v.strip():
            raise ValueError("URL cannot be empty")

        v = v.strip()
        if not (v.startswith("http://") or v.startswith("https://")):
            raise ValueError("URL must start with http:// or https://")

        return v

    @field_validator("excerpt")
    @classmethod
    def validate_excerpt(cls, v: str | None) -> str | None:
        """Normalize excerpt and truncate to the storage limit."""
        if v is None:
            return None
        return strip_xml_invalid(v).strip()[:MAX_EXCERPT_LENGTH]

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str | None) -> str | None:
        """Normalize category, falling back to the default label."""
        if v is not None:
            v = strip_xml_invalid(v)
        if v is None or not v.strip():
            return DEFAULT_CATEGORY
        return v.strip()


class Article(ScrapeCandidate):
    """
    Stored article.

    Maps to the 'articles' table. Articles are never mutated after
    creation; they are only removed by retention trimming.
    """

    id: int
    scraped_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("scraped_at")
    @classmethod
    def validate_scraped_at(cls, v: datetime) -> datetime:
        """Ensure scraped_at is timezone-aware (UTC assumed for naive values)."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class LogEntry(BaseModel):
    """
    Operational log entry displayed in the dashboard log feed.

    Maps to the 'system_logs' table. Append-only apart from retention
    trimming.
    """

    id: int
    level: LogLevel
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Validate that message is not empty."""
        if not v or not v.strip():
            raise ValueError("Log message cannot be empty")
        return v.strip()

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        """Ensure timestamp is timezone-aware (UTC assumed for naive values)."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class Setting(BaseModel):
    """
    Key-value runtime setting.

    Maps to the 'settings' table. Keys are unique; writes upsert.
    """

    id: int
    key: str
    value: str
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Validate that key is not empty."""
        if not v or not v.strip():
            raise ValueError("Setting key cannot be empty")
        return v.strip()
