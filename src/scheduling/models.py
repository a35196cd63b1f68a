"""Scheduler state and scrape run result models."""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SchedulerState(str, Enum):
    """Whether a scrape run is currently in flight."""

    IDLE = "idle"
    RUNNING = "running"


class ScrapeErrorKind(str, Enum):
    """
    Failure taxonomy for scrape runs.

    FETCH and PERSISTENCE fail the whole run and are carried in
    ``ScrapeRunResult.error``. EMPTY_RESULT is a warning, carried in
    ``ScrapeRunResult.warnings`` when a page yields no candidates.
    EXTRACTION names per-element failures: the extractor skips the element
    and logs it, so it never reaches a run result. UNEXPECTED covers any
    other exception escaping a run.
    """

    FETCH = "fetch"
    EXTRACTION = "extraction"
    EMPTY_RESULT = "empty_result"
    PERSISTENCE = "persistence"
    UNEXPECTED = "unexpected"


class ScrapeError(BaseModel):
    """Tagged error carried by a failed scrape run."""

    kind: ScrapeErrorKind
    message: str

    model_config = ConfigDict(frozen=True)


class ScrapeRunResult(BaseModel):
    """
    Outcome of one scrape execution.

    Example - Successful run:
        ScrapeRunResult(
            started_at=..., finished_at=...,
            skipped=False, candidate_count=12, added_count=3, error=None,
        )

    Example - Page yielded nothing:
        ScrapeRunResult(
            started_at=..., finished_at=...,
            candidate_count=0, added_count=0, error=None,
            warnings=[ScrapeError(kind=ScrapeErrorKind.EMPTY_RESULT, message="...")],
        )

    Example - Skipped because another run was in flight:
        ScrapeRunResult(
            started_at=..., finished_at=...,
            skipped=True, candidate_count=0, added_count=0, error=None,
        )

    Example - Fetch failed:
        ScrapeRunResult(
            started_at=..., finished_at=...,
            skipped=False, candidate_count=0, added_count=0,
            error=ScrapeError(kind=ScrapeErrorKind.FETCH, message="HTTP 503: ..."),
        )
    """

    started_at: datetime
    finished_at: datetime
    skipped: bool = False
    candidate_count: int = 0
    added_count: int = 0
    error: ScrapeError | None = None
    warnings: list[ScrapeError] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @field_validator("candidate_count", "added_count")
    @classmethod
    def validate_count(cls, v: int) -> int:
        """Validate that counts are non-negative."""
        if v < 0:
            raise ValueError("Counts must be non-negative")
        return v

    @property
    def succeeded(self) -> bool:
        """True when the run executed and finished without a run-level error."""
        return not self.skipped and self.error is None
