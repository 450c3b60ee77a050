"""Admin endpoints: account administration and task management on behalf of any owner."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasktrack.api.v1.auth import get_current_principal, require_admin
from tasktrack.api.v1.tasks import list_response, task_filters
from tasktrack.core.database import get_db
from tasktrack.schemas.auth import (
    AccountOut,
    AccountsListResponse,
    AccountStateResponse,
    MessageResponse,
    Principal,
    RoleUpdateRequest,
)
from tasktrack.schemas.tasks import AdminTaskCreate, TaskFilters, TaskOut, TasksListResponse, TaskUpdate
from tasktrack.services import accounts
from tasktrack.services import tasks as task_service

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/users", response_model=AccountsListResponse)
def list_users(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> AccountsListResponse:
    """List all accounts, newest first (admin only)."""
    users = accounts.list_accounts(db, principal)
    return AccountsListResponse(users=[AccountOut.model_validate(u) for u in users])


@router.patch("/users/{user_id}/role", response_model=AccountStateResponse)
def change_role(
    user_id: int,
    body: RoleUpdateRequest,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> AccountStateResponse:
    account = accounts.change_role(db, principal, user_id, body.role)
    return AccountStateResponse(
        message="Role updated successfully", user=AccountOut.model_validate(account)
    )


@router.patch("/users/{user_id}/freeze", response_model=AccountStateResponse)
def toggle_freeze(
    user_id: int,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> AccountStateResponse:
    """Freeze an active account or unfreeze a frozen one."""
    account = accounts.toggle_freeze(db, principal, user_id)
    message = "User frozen" if account.frozen else "User unfrozen"
    return AccountStateResponse(message=message, user=AccountOut.model_validate(account))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete an account together with every task it owns."""
    tasks_deleted = accounts.delete_account(db, principal, user_id)
    return MessageResponse(message=f"User and {tasks_deleted} todo(s) deleted")


@router.get("/todos", response_model=TasksListResponse)
def list_all_tasks(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
    filters: Annotated[TaskFilters, Depends(task_filters)],
) -> TasksListResponse:
    """List every user's tasks with optional owner, search, category, completed and overdue filters."""
    return list_response(task_service.list_tasks(db, principal, filters))


@router.post("/todos", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task_for_owner(
    body: AdminTaskCreate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> TaskOut:
    task = task_service.create_task(db, principal, body, owner_id=body.owner_id)
    return task_service.to_task_out(task)


@router.get("/todos/{task_id}", response_model=TaskOut)
def get_any_task(
    task_id: int,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> TaskOut:
    return task_service.to_task_out(task_service.get_task(db, principal, task_id))


@router.put("/todos/{task_id}", response_model=TaskOut)
def update_any_task(
    task_id: int,
    body: TaskUpdate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> TaskOut:
    task = task_service.update_task(
        db, principal, task_id, body.model_dump(exclude_unset=True)
    )
    return task_service.to_task_out(task)


@router.delete("/todos/{task_id}", response_model=MessageResponse)
def delete_any_task(
    task_id: int,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    task_service.delete_task(db, principal, task_id)
    return MessageResponse(message="Deleted")
