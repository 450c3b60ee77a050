"""
CLI entrypoint for the orphan task reconciliation job. Run from cron, e.g.:

  python -m tasktrack.reconcile

Or nightly: 0 3 * * * cd /path/to/tasktrack && .venv/bin/python -m tasktrack.reconcile
"""

import logging
import sys

from tasktrack.core.config import get_settings
from tasktrack.core.database import SessionLocal
from tasktrack.services.reconcile import purge_orphan_tasks

logger = logging.getLogger(__name__)


def main() -> int:
    """Run reconciliation: delete tasks whose owner account is gone."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    db = SessionLocal()
    try:
        deleted = purge_orphan_tasks(db, settings)
        logger.info("Reconciliation completed: orphan_tasks_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Reconciliation job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
