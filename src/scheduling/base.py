"""Base protocol for scrape schedulers."""
from typing import Protocol

from .models import ScrapeRunResult


class Scheduler(Protocol):
    """
    Protocol for services that drive periodic scrapes.

    Consumed by the settings service (rescheduling on interval change), the
    status service (``is_active``) and the HTTP API (lifecycle and manual
    refresh).
    """

    interval_minutes: int | None

    @property
    def is_active(self) -> bool:
        """True while a timer is installed."""
        ...

    @property
    def is_running(self) -> bool:
        """True while a scrape run is in flight."""
        ...

    async def start(self) -> None:
        """Run one immediate scrape, then install the timer."""
        ...

    def stop(self) -> None:
        """Cancel the timer. Idempotent."""
        ...

    async def shutdown(self, timeout: float) -> None:
        """Stop the timer, then wait up to ``timeout`` seconds for an in-flight run."""
        ...

    async def run_scrape_task(self) -> ScrapeRunResult:
        """Execute one guarded scrape. Never raises."""
        ...

    async def update_schedule(self) -> str:
        """Replace the timer from the current interval setting; return its cron expression."""
        ...
