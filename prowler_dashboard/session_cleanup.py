"""
CLI entrypoint for the expired-session purge. Run from cron, e.g.:

  python -m prowler_dashboard.session_cleanup

Or hourly: 0 * * * * cd /path/to/prowler-dashboard && .venv/bin/python -m prowler_dashboard.session_cleanup
"""

import logging
import sys

from dotenv import load_dotenv

from prowler_dashboard.core.config import get_settings
from prowler_dashboard.core.database import Database
from prowler_dashboard.core.logging import configure_logging
from prowler_dashboard.services.session_cleanup import purge_expired_sessions

logger = logging.getLogger(__name__)


def main() -> int:
    """Delete sessions whose expiry has passed."""
    load_dotenv()
    settings = get_settings()
    configure_logging(settings)
    database = Database(settings.DATABASE_URL)
    db = database.session()
    try:
        deleted = purge_expired_sessions(db)
        logger.info("Session cleanup completed: sessions_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Session cleanup failed: %s", e)
        return 1
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
