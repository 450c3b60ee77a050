"""Account lifecycle: registration, role changes, freezing and cascading deletion."""

import logging

from sqlalchemy import not_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tasktrack.core.database import run_in_store
from tasktrack.core.errors import DuplicateIdentity, NotFound, ValidationFailed
from tasktrack.core.security import hash_password
from tasktrack.models import Account, Task
from tasktrack.models.account import ROLE_USER, ROLES
from tasktrack.schemas.auth import Principal
from tasktrack.services.authorization import (
    ACTION_CHANGE_ROLE,
    ACTION_DELETE,
    ACTION_LIST,
    ACTION_TOGGLE_FREEZE,
    Intent,
    authorize,
)

logger = logging.getLogger(__name__)


def register(db: Session, email: str, username: str, password: str) -> Account:
    """
    Create a standard, active account.

    Raises DuplicateIdentity when the email or the username is taken, including
    when a concurrent registration wins the unique constraint at commit.
    """
    password_hash = hash_password(password)

    def _create(s: Session) -> Account:
        existing = (
            s.query(Account.id)
            .filter(or_(Account.email == email, Account.username == username))
            .first()
        )
        if existing is not None:
            raise DuplicateIdentity()
        account = Account(
            email=email,
            username=username,
            password_hash=password_hash,
            role=ROLE_USER,
            frozen=False,
            is_protected=False,
        )
        s.add(account)
        try:
            s.commit()
        except IntegrityError as e:
            s.rollback()
            raise DuplicateIdentity() from e
        s.refresh(account)
        return account

    account = run_in_store(db, _create)
    logger.info("Registered account_id=%s", account.id)
    return account


def list_accounts(db: Session, principal: Principal) -> list[Account]:
    """All accounts, newest first (admin only)."""
    authorize(principal, Intent(action=ACTION_LIST, resource_kind="account"))
    return run_in_store(
        db,
        lambda s: s.query(Account)
        .order_by(Account.created_at.desc(), Account.id.desc())
        .all(),
    )


def _authorize_mutation(
    s: Session,
    principal: Principal,
    action: str,
    target_id: int,
    lock: bool = False,
) -> Account:
    """
    Load the target account and authorize action against it.

    A missing target is reported as NotFound only to callers who would have
    been allowed to act on it; everyone else gets the authorization denial.
    """
    query = s.query(Account).filter(Account.id == target_id)
    if lock:
        query = query.with_for_update()
    target = query.first()
    if target is None:
        authorize(
            principal,
            Intent(action=action, resource_kind="account", target_account_id=target_id),
        )
        raise NotFound("User")
    authorize(
        principal,
        Intent(
            action=action,
            resource_kind="account",
            target_account_id=target.id,
            target_protected=bool(target.is_protected),
        ),
    )
    return target


def change_role(db: Session, principal: Principal, target_id: int, role: str) -> Account:
    """Set the target's role. The primordial admin's role never changes."""
    if role not in ROLES:
        raise ValidationFailed(
            errors=[{"loc": ["body", "role"], "msg": f"role must be one of {', '.join(ROLES)}"}]
        )

    def _change(s: Session) -> Account:
        target = _authorize_mutation(s, principal, ACTION_CHANGE_ROLE, target_id)
        s.query(Account).filter(
            Account.id == target.id, Account.is_protected.is_(False)
        ).update({Account.role: role}, synchronize_session=False)
        s.commit()
        s.refresh(target)
        return target

    target = run_in_store(db, _change)
    logger.info(
        "Role changed target_id=%s role=%s by=%s", target.id, target.role, principal.account_id
    )
    return target


def toggle_freeze(db: Session, principal: Principal, target_id: int) -> Account:
    """Flip the target's frozen flag in one UPDATE; calling twice restores it."""

    def _toggle(s: Session) -> Account:
        target = _authorize_mutation(s, principal, ACTION_TOGGLE_FREEZE, target_id)
        s.query(Account).filter(
            Account.id == target.id, Account.is_protected.is_(False)
        ).update({Account.frozen: not_(Account.frozen)}, synchronize_session=False)
        s.commit()
        s.refresh(target)
        return target

    target = run_in_store(db, _toggle)
    logger.info(
        "Freeze toggled target_id=%s frozen=%s by=%s",
        target.id,
        target.frozen,
        principal.account_id,
    )
    return target


def delete_account(db: Session, principal: Principal, target_id: int) -> int:
    """
    Delete the target account and every task it owns in one transaction.

    The account row is locked first so no task can be created for it while the
    cascade runs. Returns the number of tasks removed.
    """

    def _delete(s: Session) -> int:
        target = _authorize_mutation(s, principal, ACTION_DELETE, target_id, lock=True)
        tasks_deleted = (
            s.query(Task)
            .filter(Task.owner_id == target.id)
            .delete(synchronize_session=False)
        )
        s.query(Account).filter(
            Account.id == target.id, Account.is_protected.is_(False)
        ).delete(synchronize_session=False)
        s.commit()
        return tasks_deleted

    tasks_deleted = run_in_store(db, _delete)
    logger.info(
        "Account deleted target_id=%s tasks_deleted=%s by=%s",
        target_id,
        tasks_deleted,
        principal.account_id,
    )
    return tasks_deleted
