"""
CLI entrypoint for the expired refresh token cleanup job. Run from cron, e.g.:

  python -m app.retention

Or hourly: 0 * * * * cd /path/to/turnstile && .venv/bin/python -m app.retention
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import Database
from app.core.logging import configure_logging
from app.services.retention import purge_expired_refresh_tokens

logger = logging.getLogger(__name__)


def main() -> int:
    """Run cleanup: delete refresh tokens past their expiry."""
    settings = get_settings()
    configure_logging(settings)
    database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    db = database.SessionLocal()
    try:
        tokens_deleted = purge_expired_refresh_tokens(db, settings)
        logger.info("Token cleanup completed: tokens_deleted=%s", tokens_deleted)
        return 0
    except Exception as e:
        logger.exception("Token cleanup job failed: %s", e)
        return 1
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
