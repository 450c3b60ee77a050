"""Unit tests for tasktrack.services.authorization: rule order, ownership, visibility."""

import unittest

from tasktrack.core.errors import AccountFrozen, Forbidden, ProtectedAccount
from tasktrack.schemas.auth import Principal
from tasktrack.services.authorization import (
    ACTION_CHANGE_ROLE,
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_LIST,
    ACTION_READ,
    ACTION_TOGGLE_FREEZE,
    ACTION_UPDATE,
    Intent,
    authorize,
    decide,
    ensure_active,
    task_visibility,
)

ALICE = Principal(account_id=1, role="user")
BOB = Principal(account_id=2, role="user")
ADMIN = Principal(account_id=9, role="admin")


class TestFrozenPrincipal(unittest.TestCase):
    """A frozen principal is denied everything, admin or not."""

    def test_frozen_user_denied_own_task(self) -> None:
        frozen = Principal(account_id=1, role="user", frozen=True)
        decision = decide(frozen, Intent(ACTION_READ, "task", resource_owner_id=1))
        self.assertFalse(decision.allowed)
        self.assertIs(decision.error, AccountFrozen)

    def test_frozen_admin_denied_admin_action(self) -> None:
        frozen_admin = Principal(account_id=9, role="admin", frozen=True)
        with self.assertRaises(AccountFrozen):
            authorize(frozen_admin, Intent(ACTION_LIST, "account"))

    def test_ensure_active(self) -> None:
        ensure_active(ALICE)
        with self.assertRaises(AccountFrozen):
            ensure_active(Principal(account_id=1, role="user", frozen=True))


class TestProtectedAccount(unittest.TestCase):
    """Mutations against the protected account are refused for every caller."""

    def test_admin_cannot_mutate_protected(self) -> None:
        for action in (ACTION_CHANGE_ROLE, ACTION_TOGGLE_FREEZE, ACTION_DELETE):
            with self.subTest(action=action):
                intent = Intent(action, "account", target_account_id=5, target_protected=True)
                with self.assertRaises(ProtectedAccount) as ctx:
                    authorize(ADMIN, intent)
                self.assertTrue(ctx.exception.actor_is_admin)

    def test_protected_admin_cannot_mutate_self(self) -> None:
        root = Principal(account_id=5, role="admin")
        intent = Intent(ACTION_DELETE, "account", target_account_id=5, target_protected=True)
        with self.assertRaises(ProtectedAccount):
            authorize(root, intent)

    def test_standard_user_gets_protected_error_too(self) -> None:
        intent = Intent(ACTION_TOGGLE_FREEZE, "account", target_account_id=5, target_protected=True)
        with self.assertRaises(ProtectedAccount) as ctx:
            authorize(ALICE, intent)
        self.assertFalse(ctx.exception.actor_is_admin)

    def test_listing_is_not_a_mutation(self) -> None:
        intent = Intent(ACTION_LIST, "account", target_protected=True)
        self.assertTrue(decide(ADMIN, intent).allowed)


class TestTaskRules(unittest.TestCase):
    """Owners and admins may act on a task; nobody else may."""

    def test_owner_allowed_every_action(self) -> None:
        for action in (ACTION_READ, ACTION_CREATE, ACTION_UPDATE, ACTION_DELETE):
            with self.subTest(action=action):
                self.assertTrue(decide(ALICE, Intent(action, "task", resource_owner_id=1)).allowed)

    def test_non_owner_forbidden(self) -> None:
        for action in (ACTION_READ, ACTION_CREATE, ACTION_UPDATE, ACTION_DELETE):
            with self.subTest(action=action):
                with self.assertRaises(Forbidden):
                    authorize(BOB, Intent(action, "task", resource_owner_id=1))

    def test_missing_owner_forbidden(self) -> None:
        decision = decide(ALICE, Intent(ACTION_READ, "task"))
        self.assertFalse(decision.allowed)
        self.assertIs(decision.error, Forbidden)

    def test_admin_allowed_any_owner(self) -> None:
        for action in (ACTION_READ, ACTION_CREATE, ACTION_UPDATE, ACTION_DELETE):
            with self.subTest(action=action):
                self.assertTrue(decide(ADMIN, Intent(action, "task", resource_owner_id=1)).allowed)

    def test_everyone_active_may_list(self) -> None:
        self.assertTrue(decide(ALICE, Intent(ACTION_LIST, "task")).allowed)
        self.assertTrue(decide(ADMIN, Intent(ACTION_LIST, "task")).allowed)


class TestAccountRules(unittest.TestCase):
    def test_standard_user_cannot_administer(self) -> None:
        for action in (ACTION_LIST, ACTION_CHANGE_ROLE, ACTION_TOGGLE_FREEZE, ACTION_DELETE):
            with self.subTest(action=action):
                with self.assertRaises(Forbidden):
                    authorize(ALICE, Intent(action, "account", target_account_id=2))

    def test_admin_can_administer(self) -> None:
        for action in (ACTION_LIST, ACTION_CHANGE_ROLE, ACTION_TOGGLE_FREEZE, ACTION_DELETE):
            with self.subTest(action=action):
                authorize(ADMIN, Intent(action, "account", target_account_id=2))

    def test_unknown_action_denied_by_default(self) -> None:
        decision = decide(ADMIN, Intent("export", "account"))
        self.assertFalse(decision.allowed)
        self.assertEqual(decision.rule, "default-deny")
        self.assertFalse(decide(ADMIN, Intent("read", "account")).allowed)

    def test_decisions_are_deterministic(self) -> None:
        intent = Intent(ACTION_UPDATE, "task", resource_owner_id=1)
        self.assertEqual(decide(BOB, intent), decide(BOB, intent))


class TestTaskVisibility(unittest.TestCase):
    def test_admin_sees_everything(self) -> None:
        self.assertIsNone(task_visibility(ADMIN))

    def test_user_sees_own(self) -> None:
        self.assertEqual(task_visibility(ALICE), 1)
        self.assertEqual(task_visibility(BOB), 2)


if __name__ == "__main__":
    unittest.main()
