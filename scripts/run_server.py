"""
Run the RSS feed server.

Serves /rss.xml and the dashboard API, scraping the listing page on a
schedule (default every 15 minutes, changeable at runtime via
POST /api/settings).

Usage:
    # In-memory store (default)
    uv run python scripts/run_server.py

    # PostgreSQL store (run `alembic upgrade head` first)
    STORE_BACKEND=postgres DATABASE_URL=postgresql://... uv run python scripts/run_server.py

    # Custom bind address and verbose logging
    uv run python scripts/run_server.py --host 127.0.0.1 --port 8000 --log-level DEBUG
"""

import argparse
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from loguru import logger

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.log_config import configure_logging
from config.settings import AppConfig
from src.api.app import create_app
from src.api.container import build_container


def main() -> int:
    """Main entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="UNIK Kediri RSS feed server")
    parser.add_argument("--host", type=str, default=None, help="Bind address (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: PORT or 5000)")
    parser.add_argument("--log-level", type=str, default=None, help="Log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON structured logs")
    args = parser.parse_args()

    try:
        config = AppConfig.from_env()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    configure_logging(log_level=args.log_level or config.log_level, enable_json=args.json_logs)

    host = args.host or config.host
    port = args.port or config.port

    logger.info(f"Serving RSS feed on {host}:{port} (store: {config.store_backend})")
    app = create_app(build_container(config))
    uvicorn.run(app, host=host, port=port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
