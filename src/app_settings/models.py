"""Runtime setting keys, defaults, and request models."""
from pydantic import BaseModel, field_validator

from config.settings import DEFAULT_SOURCE_URL


UPDATE_INTERVAL_KEY = "updateInterval"
MAX_ARTICLES_KEY = "maxArticles"
SOURCE_URL_KEY = "sourceUrl"

DEFAULT_UPDATE_INTERVAL_MINUTES = 15
DEFAULT_MAX_ARTICLES = 20


def default_settings(source_url: str = DEFAULT_SOURCE_URL) -> dict[str, str]:
    """Settings every store starts with."""
    return {
        UPDATE_INTERVAL_KEY: str(DEFAULT_UPDATE_INTERVAL_MINUTES),
        MAX_ARTICLES_KEY: str(DEFAULT_MAX_ARTICLES),
        SOURCE_URL_KEY: source_url,
    }


def parse_positive_int(value: str | None, default: int) -> int:
    """
    Parse a stored setting value as a positive integer.

    Returns ``default`` when the value is missing, not an integer, or < 1.

    Example:
        >>> parse_positive_int("30", 15)
        30
        >>> parse_positive_int("abc", 15)
        15
    """
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


class SettingUpdate(BaseModel):
    """Body of a settings update request."""

    key: str
    value: str

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Validate that key is not empty."""
        if not v or not v.strip():
            raise ValueError("Setting key cannot be empty")
        return v.strip()

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        """Strip surrounding whitespace from the value."""
        return v.strip()
