"""Helpers shared across test modules."""

from datetime import datetime, timedelta, timezone

from src.record_store.models import ScrapeCandidate


class SteppingClock:
    """Deterministic clock: every call returns a time one second later."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


def make_candidate(n: int, **overrides) -> ScrapeCandidate:
    """Build a valid candidate whose url is unique per ``n``."""
    fields = {
        "title": f"Kegiatan kampus nomor {n} resmi dibuka",
        "url": f"https://unik-kediri.ac.id/berita/{n}",
        "excerpt": f"Ringkasan berita {n}",
        "category": "Akademik",
        "published_date": "2024-01-15",
    }
    fields.update(overrides)
    return ScrapeCandidate(**fields)
