"""JSON response shapes for the dashboard API (camelCase on the wire)."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.record_store.models import LogLevel
from src.scheduling.models import ScrapeErrorKind
from src.status.models import FeedHealth


class ApiModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ArticleResponse(ApiModel):
    id: int
    title: str
    excerpt: str | None
    url: str
    category: str
    published_date: str | None
    scraped_at: datetime


class LogEntryResponse(ApiModel):
    id: int
    level: LogLevel
    message: str
    timestamp: datetime


class SettingResponse(ApiModel):
    id: int
    key: str
    value: str
    updated_at: datetime


class RssStatusResponse(ApiModel):
    status: FeedHealth
    last_update: str
    article_count: int
    success_rate: float
    is_scraping_active: bool


class ServerInfoResponse(ApiModel):
    python_version: str
    memory_usage: str
    uptime: str


class ScrapeErrorResponse(ApiModel):
    kind: ScrapeErrorKind
    message: str


class ScrapeRunResponse(ApiModel):
    started_at: datetime
    finished_at: datetime
    skipped: bool
    candidate_count: int
    added_count: int
    error: ScrapeErrorResponse | None
    warnings: list[ScrapeErrorResponse]


class RefreshResponse(ApiModel):
    message: str
    result: ScrapeRunResponse


class HealthResponse(ApiModel):
    status: str
    timestamp: datetime
    service: str
