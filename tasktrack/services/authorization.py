"""
Authorization engine: one decision function for every task and account operation.

decide() is pure (no I/O) and deterministic for a given principal/intent pair.
Callers fetch the resource owner and the target's protected flag from storage
before building the intent; nothing in an intent comes from client input.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from tasktrack.core.errors import AccountFrozen, Forbidden, ProtectedAccount, TasktrackError
from tasktrack.models.account import ROLE_ADMIN
from tasktrack.schemas.auth import Principal

logger = logging.getLogger(__name__)

ResourceKind = Literal["task", "account"]

ACTION_READ = "read"
ACTION_LIST = "list"
ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_DELETE = "delete"
ACTION_CHANGE_ROLE = "change_role"
ACTION_TOGGLE_FREEZE = "toggle_freeze"

TASK_ACTIONS = frozenset(
    {ACTION_READ, ACTION_LIST, ACTION_CREATE, ACTION_UPDATE, ACTION_DELETE}
)
ACCOUNT_MUTATIONS = frozenset({ACTION_CHANGE_ROLE, ACTION_TOGGLE_FREEZE, ACTION_DELETE})


@dataclass(frozen=True)
class Intent:
    """What a principal is trying to do, and to which resource."""

    action: str
    resource_kind: ResourceKind
    resource_owner_id: int | None = None
    target_account_id: int | None = None
    target_protected: bool = False


@dataclass(frozen=True)
class Decision:
    allowed: bool
    error: type[TasktrackError] | None = None
    rule: str = ""


ALLOW = Decision(allowed=True, rule="allow")


def decide(principal: Principal, intent: Intent) -> Decision:
    """Evaluate the rules in order; the first match decides. Deny by default."""
    if principal.frozen:
        return Decision(False, AccountFrozen, "frozen")

    if (
        intent.resource_kind == "account"
        and intent.action in ACCOUNT_MUTATIONS
        and intent.target_protected
    ):
        return Decision(False, ProtectedAccount, "protected")

    is_admin = principal.role == ROLE_ADMIN

    if intent.resource_kind == "task" and intent.action in TASK_ACTIONS:
        if is_admin:
            return ALLOW
        if intent.action == ACTION_LIST:
            # Narrowed by task_visibility(); never broadened by request input.
            return ALLOW
        if intent.resource_owner_id is not None and intent.resource_owner_id == principal.account_id:
            return ALLOW
        return Decision(False, Forbidden, "not-owner")

    if intent.resource_kind == "account" and (
        intent.action == ACTION_LIST or intent.action in ACCOUNT_MUTATIONS
    ):
        if is_admin:
            return ALLOW
        return Decision(False, Forbidden, "not-admin")

    return Decision(False, Forbidden, "default-deny")


def authorize(principal: Principal, intent: Intent) -> None:
    """Raise the denial error for intent, or return if it is allowed."""
    decision = decide(principal, intent)
    if decision.allowed:
        return
    logger.info(
        "Denied account_id=%s action=%s kind=%s rule=%s",
        principal.account_id,
        intent.action,
        intent.resource_kind,
        decision.rule,
    )
    if decision.error is ProtectedAccount:
        raise ProtectedAccount(actor_is_admin=principal.role == ROLE_ADMIN)
    error_cls = decision.error or Forbidden
    raise error_cls()


def task_visibility(principal: Principal) -> int | None:
    """Owner id a task listing is restricted to, or None when every task is visible."""
    if principal.role == ROLE_ADMIN:
        return None
    return principal.account_id


def ensure_active(principal: Principal) -> None:
    """Rule 1 on its own, for operations that must reject frozen principals before any lookup."""
    if principal.frozen:
        raise AccountFrozen()
