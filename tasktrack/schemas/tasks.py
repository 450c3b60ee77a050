"""Pydantic schemas for task records: create/update payloads, filters and responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from tasktrack.models.task import DESCRIPTION_MAX_LEN, TITLE_MAX_LEN

CategoryName = Literal["Urgent", "Non-Urgent"]

SEARCH_MAX_LEN = 100


class TaskCreate(BaseModel):
    """Fields a caller may set when creating a task. The owner comes from the session."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LEN)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LEN)
    due_date: datetime | None = Field(default=None, description="ISO 8601 timestamp")
    category: CategoryName = "Non-Urgent"


class AdminTaskCreate(TaskCreate):
    """Admin variant: create a task on behalf of an explicit owner."""

    owner_id: int = Field(..., ge=1, description="Account that will own the task")


class TaskUpdate(BaseModel):
    """
    Allow-listed mutable fields. Anything else, including owner_id, is rejected.

    Only fields present in the payload are applied.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LEN)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LEN)
    due_date: datetime | None = None
    category: CategoryName | None = None
    completed: bool | None = None


class TaskFilters(BaseModel):
    """Listing filters. owner_id is honoured for admins only."""

    search: str | None = Field(default=None, max_length=SEARCH_MAX_LEN)
    category: CategoryName | None = None
    completed: bool | None = None
    overdue: bool | None = None
    owner_id: int | None = Field(default=None, ge=1)


class TaskOut(BaseModel):
    """Task as returned to callers, with the computed is_overdue flag."""

    id: int
    title: str
    description: str | None = None
    due_date: datetime | None = None
    category: str
    completed: bool
    owner_id: int
    is_overdue: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TasksListResponse(BaseModel):
    tasks: list[TaskOut]
    count: int
