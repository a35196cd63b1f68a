"""Dashboard status models."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class FeedHealth(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"


class RssStatus(BaseModel):
    """Aggregate feed health shown on the dashboard."""

    status: FeedHealth
    last_update: str
    article_count: int
    success_rate: float
    is_scraping_active: bool

    model_config = ConfigDict(frozen=True)

    @field_validator("success_rate")
    @classmethod
    def validate_success_rate(cls, v: float) -> float:
        """Validate that success rate is a percentage."""
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"Success rate must be between 0 and 100, got: {v}")
        return v


class ServerInfo(BaseModel):
    """Process statistics shown on the dashboard."""

    python_version: str
    memory_usage: str
    uptime: str

    model_config = ConfigDict(frozen=True)
