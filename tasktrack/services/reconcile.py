"""Orphan reconciliation: delete tasks whose owning account no longer exists."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import Session

from tasktrack.models import Account, Task

if TYPE_CHECKING:
    from tasktrack.core.config import Settings

logger = logging.getLogger(__name__)


def purge_orphan_tasks(session: Session, settings: "Settings") -> int:
    """
    Delete tasks that reference a missing account. Returns the number deleted.

    Reads already hide such tasks; this removes them for good. Idempotent.
    """
    if not settings.RECONCILE_ENABLED:
        logger.info("Reconciliation is disabled (RECONCILE_ENABLED=false); skipping.")
        return 0

    deleted_count = (
        session.query(Task)
        .filter(Task.owner_id.not_in(select(Account.id)))
        .delete(synchronize_session=False)
    )
    session.commit()

    if deleted_count > 0:
        logger.warning("Reconciliation run: orphan_tasks_deleted=%s", deleted_count)
    return deleted_count
