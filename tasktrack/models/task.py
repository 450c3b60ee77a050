"""ORM model for task records. Each task belongs to exactly one account."""

from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func, false

from tasktrack.models.base import Base

CATEGORY_URGENT = "Urgent"
CATEGORY_NON_URGENT = "Non-Urgent"
CATEGORIES = (CATEGORY_URGENT, CATEGORY_NON_URGENT)

TITLE_MAX_LEN = 100
DESCRIPTION_MAX_LEN = 500


class Task(Base):
    """
    A personal task ("todo").

    owner_id is set at creation and never changed. There is no database-level
    cascade: account deletion removes the owner's tasks explicitly.
    """

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(TITLE_MAX_LEN), nullable=False)
    description = Column(String(DESCRIPTION_MAX_LEN), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    category = Column(String(32), nullable=False, default=CATEGORY_NON_URGENT)
    completed = Column(Boolean, nullable=False, default=False, server_default=false())
    owner_id = Column(
        Integer,
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Due date set, in the past, and not completed. Computed, never stored."""
        if self.due_date is None or self.completed:
            return False
        due = self.due_date
        # SQLite hands back naive datetimes; stored values are always UTC.
        if due.tzinfo is None:
            due = due.replace(tzinfo=UTC)
        return due < (now or datetime.now(UTC))
