"""create articles, system_logs and settings tables

Revision ID: 8c41d2e7a5b3
Revises: 
Create Date: 2026-10-19 09:00:12.418305

"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '8c41d2e7a5b3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Scraped articles, unique by url
    op.execute("""
        CREATE TABLE articles (
            id SERIAL PRIMARY KEY,
            title VARCHAR(500) NOT NULL,
            excerpt VARCHAR(1000),
            url VARCHAR UNIQUE NOT NULL,
            category VARCHAR NOT NULL DEFAULT 'Umum',
            published_date VARCHAR(10),
            scraped_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX idx_articles_scraped_at ON articles(scraped_at DESC, id DESC)")

    # Operational log shown on the dashboard
    op.execute("""
        CREATE TABLE system_logs (
            id SERIAL PRIMARY KEY,
            level VARCHAR(10) NOT NULL,
            message TEXT NOT NULL,
            timestamp TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT chk_system_logs_level
                CHECK (level IN ('info', 'warn', 'error', 'success'))
        )
    """)
    op.execute("CREATE INDEX idx_system_logs_timestamp ON system_logs(timestamp DESC, id DESC)")

    # Runtime settings (updateInterval, maxArticles, sourceUrl)
    op.execute("""
        CREATE TABLE settings (
            id SERIAL PRIMARY KEY,
            key VARCHAR UNIQUE NOT NULL,
            value TEXT NOT NULL,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TABLE IF EXISTS settings")

    op.execute("DROP INDEX IF EXISTS idx_system_logs_timestamp")
    op.execute("DROP TABLE IF EXISTS system_logs")

    op.execute("DROP INDEX IF EXISTS idx_articles_scraped_at")
    op.execute("DROP TABLE IF EXISTS articles")
