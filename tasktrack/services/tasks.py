"""Task operations gated by the authorization engine."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import and_, not_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from tasktrack.core.database import run_in_store
from tasktrack.core.errors import Forbidden, NotFound, ValidationFailed
from tasktrack.models import Account, Task
from tasktrack.schemas.auth import Principal
from tasktrack.schemas.tasks import TaskCreate, TaskFilters, TaskOut
from tasktrack.services.authorization import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_LIST,
    ACTION_READ,
    ACTION_UPDATE,
    Intent,
    authorize,
    ensure_active,
    task_visibility,
)

logger = logging.getLogger(__name__)

# The only fields an update may touch. owner_id and timestamps are never writable.
MUTABLE_TASK_FIELDS = ("title", "description", "category", "due_date", "completed")
NON_NULLABLE_FIELDS = frozenset({"title", "category", "completed"})


def _to_utc(value: datetime | None) -> datetime | None:
    """Store every due date in UTC; naive timestamps are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _visible_tasks(s: Session) -> Query:
    """Tasks whose owner still exists. Orphans never resolve."""
    return s.query(Task).join(Account, Account.id == Task.owner_id)


def _load_task(s: Session, task_id: int) -> Task:
    task = _visible_tasks(s).filter(Task.id == task_id).first()
    if task is None:
        raise NotFound("Todo")
    return task


def to_task_out(task: Task, now: datetime | None = None) -> TaskOut:
    """Serialize a task with its computed is_overdue flag."""
    return TaskOut(
        id=task.id,
        title=task.title,
        description=task.description,
        due_date=_to_utc(task.due_date),
        category=task.category,
        completed=task.completed,
        owner_id=task.owner_id,
        is_overdue=task.is_overdue(now),
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def list_tasks(
    db: Session, principal: Principal, filters: TaskFilters | None = None
) -> list[Task]:
    """
    Tasks visible to principal, newest first, narrowed by filters.

    Standard users only ever see their own tasks; their owner_id filter is
    replaced by the visibility filter rather than combined with it.
    """
    authorize(principal, Intent(action=ACTION_LIST, resource_kind="task"))
    filters = filters or TaskFilters()
    owner_id = task_visibility(principal)
    if owner_id is None:
        owner_id = filters.owner_id

    def _list(s: Session) -> list[Task]:
        query = _visible_tasks(s)
        if owner_id is not None:
            query = query.filter(Task.owner_id == owner_id)
        if filters.search:
            query = query.filter(
                or_(
                    Task.title.icontains(filters.search, autoescape=True),
                    Task.description.icontains(filters.search, autoescape=True),
                )
            )
        if filters.category is not None:
            query = query.filter(Task.category == filters.category)
        if filters.completed is not None:
            query = query.filter(Task.completed.is_(filters.completed))
        if filters.overdue is not None:
            overdue = and_(
                Task.due_date.is_not(None),
                Task.due_date < datetime.now(UTC),
                Task.completed.is_(False),
            )
            query = query.filter(overdue if filters.overdue else not_(overdue))
        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    return run_in_store(db, _list)


def create_task(
    db: Session,
    principal: Principal,
    fields: TaskCreate,
    owner_id: int | None = None,
) -> Task:
    """
    Create a task owned by principal, or by owner_id when an admin creates on someone's behalf.

    Raises NotFound when the named owner does not exist.
    """
    owner = owner_id if owner_id is not None else principal.account_id
    authorize(
        principal,
        Intent(action=ACTION_CREATE, resource_kind="task", resource_owner_id=owner),
    )

    def _create(s: Session) -> Task:
        if s.query(Account.id).filter(Account.id == owner).first() is None:
            raise NotFound("User")
        task = Task(
            title=fields.title,
            description=fields.description,
            due_date=_to_utc(fields.due_date),
            category=fields.category,
            completed=False,
            owner_id=owner,
        )
        s.add(task)
        try:
            s.commit()
        except IntegrityError as e:
            # Owner deleted between the existence check and the insert.
            s.rollback()
            raise NotFound("User") from e
        s.refresh(task)
        return task

    task = run_in_store(db, _create)
    logger.info("Task created task_id=%s owner_id=%s by=%s", task.id, owner, principal.account_id)
    return task


def get_task(db: Session, principal: Principal, task_id: int) -> Task:
    ensure_active(principal)

    def _get(s: Session) -> Task:
        task = _load_task(s, task_id)
        authorize(
            principal,
            Intent(action=ACTION_READ, resource_kind="task", resource_owner_id=task.owner_id),
        )
        return task

    return run_in_store(db, _get)


def _classify_miss(s: Session, principal: Principal, action: str, task_id: int) -> None:
    """
    A conditional write matched nothing: raise NotFound if the task is gone,
    otherwise the authorization denial for its real owner.
    """
    s.rollback()
    task = _load_task(s, task_id)
    authorize(
        principal,
        Intent(action=action, resource_kind="task", resource_owner_id=task.owner_id),
    )
    raise Forbidden()


def _update_values(changes: dict[str, Any]) -> dict[str, Any]:
    values = {k: v for k, v in changes.items() if k in MUTABLE_TASK_FIELDS}
    if not values:
        raise ValidationFailed(
            errors=[{"loc": ["body"], "msg": "No updatable fields supplied"}]
        )
    errors = [
        {"loc": ["body", k], "msg": "Field may not be null"}
        for k in sorted(NON_NULLABLE_FIELDS)
        if k in values and values[k] is None
    ]
    if errors:
        raise ValidationFailed(errors=errors)
    if "due_date" in values:
        values["due_date"] = _to_utc(values["due_date"])
    return values


def update_task(
    db: Session, principal: Principal, task_id: int, changes: dict[str, Any]
) -> Task:
    """
    Apply allow-listed field changes in one conditional UPDATE.

    For standard users the statement is keyed on (id, owner_id=principal), so the
    ownership check and the write cannot be separated by a concurrent change.
    Keys outside MUTABLE_TASK_FIELDS are dropped.
    """
    ensure_active(principal)
    values = _update_values(changes)
    owner_scope = task_visibility(principal)

    def _update(s: Session) -> Task:
        query = s.query(Task).filter(
            Task.id == task_id, Task.owner_id.in_(select(Account.id))
        )
        if owner_scope is not None:
            query = query.filter(Task.owner_id == owner_scope)
        matched = query.update(values, synchronize_session=False)
        if not matched:
            _classify_miss(s, principal, ACTION_UPDATE, task_id)
        s.commit()
        return _load_task(s, task_id)

    task = run_in_store(db, _update)
    logger.info(
        "Task updated task_id=%s fields=%s by=%s",
        task_id,
        ",".join(sorted(values)),
        principal.account_id,
    )
    return task


def delete_task(db: Session, principal: Principal, task_id: int) -> None:
    """
    Delete a task in one conditional DELETE keyed on (id, owner_id=principal) for
    standard users, or on id alone for admins. Tasks without a live owner never match.
    """
    ensure_active(principal)
    owner_scope = task_visibility(principal)

    def _delete(s: Session) -> None:
        query = s.query(Task).filter(
            Task.id == task_id, Task.owner_id.in_(select(Account.id))
        )
        if owner_scope is not None:
            query = query.filter(Task.owner_id == owner_scope)
        deleted = query.delete(synchronize_session=False)
        if not deleted:
            _classify_miss(s, principal, ACTION_DELETE, task_id)
        s.commit()

    run_in_store(db, _delete)
    logger.info("Task deleted task_id=%s by=%s", task_id, principal.account_id)
