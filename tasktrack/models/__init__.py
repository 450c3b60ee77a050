"""SQLAlchemy ORM models."""

from tasktrack.models.account import Account
from tasktrack.models.base import Base
from tasktrack.models.task import Task

__all__ = ["Account", "Base", "Task"]
