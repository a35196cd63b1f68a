"""Process-level configuration read from the environment.

Values here are fixed for the lifetime of the process. Values that can be
changed at runtime from the dashboard (update interval, max articles, source
url) live in the record store as Settings; the environment only provides the
seed for the source url.
"""
import os
from dataclasses import dataclass, field


DEFAULT_SOURCE_URL = "https://unik-kediri.ac.id/list-berita"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class AppConfig:
    """
    Application configuration.

    Attributes:
        source_url: Listing page to scrape (seeds the ``sourceUrl`` setting)
        store_backend: "memory" or "postgres"
        database_url: PostgreSQL URL (only used by the postgres backend)
        feed_base_url: Public base url of this service (used in the RSS feed)
        host: Bind address for the HTTP server
        port: Bind port for the HTTP server
        log_level: Loguru level name
        cors_origins: Allowed CORS origins for the dashboard
    """

    source_url: str = DEFAULT_SOURCE_URL
    store_backend: str = "memory"
    database_url: str | None = None
    feed_base_url: str = "http://localhost:5000"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build configuration from environment variables (call load_dotenv() first)."""
        store_backend = os.getenv("STORE_BACKEND", "memory").strip().lower()
        if store_backend not in ("memory", "postgres"):
            raise ValueError(
                f"Unsupported STORE_BACKEND: {store_backend}. "
                f"Supported backends: memory, postgres"
            )

        origins = os.getenv("CORS_ORIGINS")
        return cls(
            source_url=os.getenv("SOURCE_URL", DEFAULT_SOURCE_URL),
            store_backend=store_backend,
            database_url=os.getenv("DATABASE_URL"),
            feed_base_url=os.getenv("FEED_BASE_URL", "http://localhost:5000").rstrip("/"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 5000),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins
                else ["http://localhost:5173"]
            ),
        )
