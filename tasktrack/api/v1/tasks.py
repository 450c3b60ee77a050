"""Task endpoints for the signed-in principal. Admins see and manage every task here too."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tasktrack.api.v1.auth import get_current_principal
from tasktrack.core.database import get_db
from tasktrack.schemas.auth import MessageResponse, Principal
from tasktrack.schemas.tasks import (
    SEARCH_MAX_LEN,
    CategoryName,
    TaskCreate,
    TaskFilters,
    TaskOut,
    TasksListResponse,
    TaskUpdate,
)
from tasktrack.services import tasks as task_service

router = APIRouter()


def task_filters(
    search: Annotated[str | None, Query(max_length=SEARCH_MAX_LEN)] = None,
    category: Annotated[CategoryName | None, Query()] = None,
    completed: Annotated[bool | None, Query()] = None,
    overdue: Annotated[bool | None, Query()] = None,
    owner_id: Annotated[int | None, Query(ge=1)] = None,
) -> TaskFilters:
    """Dependency: listing filters from the query string."""
    return TaskFilters(
        search=search,
        category=category,
        completed=completed,
        overdue=overdue,
        owner_id=owner_id,
    )


def list_response(tasks: list) -> TasksListResponse:
    items = [task_service.to_task_out(t) for t in tasks]
    return TasksListResponse(tasks=items, count=len(items))


@router.get("", response_model=TasksListResponse)
def list_tasks(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
    filters: Annotated[TaskFilters, Depends(task_filters)],
) -> TasksListResponse:
    """
    List tasks visible to the caller, newest first.

    Standard users only ever get their own tasks, whatever filters they send.
    """
    return list_response(task_service.list_tasks(db, principal, filters))


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    body: TaskCreate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> TaskOut:
    task = task_service.create_task(db, principal, body)
    return task_service.to_task_out(task)


@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: int,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> TaskOut:
    return task_service.to_task_out(task_service.get_task(db, principal, task_id))


@router.put("/{task_id}", response_model=TaskOut)
@router.patch("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    body: TaskUpdate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> TaskOut:
    """Update title, description, category, due_date or completed. Only sent fields change."""
    task = task_service.update_task(
        db, principal, task_id, body.model_dump(exclude_unset=True)
    )
    return task_service.to_task_out(task)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    task_service.delete_task(db, principal, task_id)
    return MessageResponse(message="Deleted")
