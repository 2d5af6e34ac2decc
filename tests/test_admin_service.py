"""Tests for store_ratings.services.admin (user listing, role changes, deletion) and accounts."""

import unittest
from unittest.mock import patch

from store_ratings.core.errors import AuthenticationError, BadRequestError, ConflictError, NotFoundError
from store_ratings.core.permissions import Role
from store_ratings.models import Rating, Store, User
from store_ratings.schemas.auth import PasswordChangeRequest, SignupRequest
from store_ratings.schemas.users import AdminCreateUserRequest, UserFilter
from store_ratings.services import accounts, admin
from tests.support import PASSWORD, DatabaseTestCase


class TestDeleteUser(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_user("admin@mail.dev", role=Role.SYSTEM_ADMIN)
        self.owner = self.make_user("owner@mail.dev", role=Role.STORE_OWNER)
        self.rater = self.make_user("rater@mail.dev")
        self.store = self.make_store(self.owner)
        self.other_store = self.make_store(self.make_user("o2@mail.dev", role=Role.STORE_OWNER), name="Far Shop")

    def test_owner_deletion_removes_store_and_its_ratings(self) -> None:
        self.make_rating(self.rater, self.store, 5)
        self.make_rating(self.owner, self.other_store, 3)
        admin.delete_user(self.db, self.admin.id, self.owner.id)
        db = self.reload()
        self.assertIsNone(db.get(User, self.owner.id))
        self.assertIsNone(db.get(Store, self.store.id))
        self.assertEqual(db.query(Rating).count(), 0)
        self.assertIsNotNone(db.get(Store, self.other_store.id))

    def test_rater_deletion_keeps_stores(self) -> None:
        self.make_rating(self.rater, self.store, 2)
        admin.delete_user(self.db, self.admin.id, self.rater.id)
        db = self.reload()
        self.assertIsNone(db.get(User, self.rater.id))
        self.assertEqual(db.query(Rating).count(), 0)
        self.assertEqual(db.query(Store).count(), 2)

    def test_self_deletion_rejected(self) -> None:
        with self.assertRaises(BadRequestError) as ctx:
            admin.delete_user(self.db, self.admin.id, self.admin.id)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertIsNotNone(self.reload().get(User, self.admin.id))

    def test_missing_user(self) -> None:
        with self.assertRaises(NotFoundError):
            admin.delete_user(self.db, self.admin.id, "no-such-user")


class TestUsersAndDashboard(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_user("admin@mail.dev", role=Role.SYSTEM_ADMIN, name="Ada Admin")
        owner = self.make_user("owner@mail.dev", role=Role.STORE_OWNER, name="Oscar Owner")
        self.make_user("norm@mail.dev", name="Nora Normal")
        self.store = self.make_store(owner)

    def test_list_filters_by_role(self) -> None:
        page = admin.list_users(self.db, UserFilter(role=Role.STORE_OWNER))
        self.assertEqual([u.name for u in page.users], ["Oscar Owner"])
        self.assertEqual(page.users[0].store.id, self.store.id)

    def test_list_sorts_and_paginates(self) -> None:
        page = admin.list_users(self.db, UserFilter(sort_by="name", sort_order="asc", limit=2))
        self.assertEqual([u.name for u in page.users], ["Ada Admin", "Nora Normal"])
        self.assertEqual((page.pagination.total, page.pagination.total_pages), (3, 2))
        self.assertIsNone(page.users[1].store)

    def test_dashboard_counts(self) -> None:
        dashboard = admin.get_dashboard(self.db)
        stats = dashboard.statistics
        self.assertEqual((stats.total_users, stats.total_stores, stats.total_ratings), (3, 1, 0))
        self.assertEqual(
            stats.users_by_role,
            {"SYSTEM_ADMIN": 1, "NORMAL_USER": 1, "STORE_OWNER": 1},
        )
        self.assertEqual(len(dashboard.recent_users), 3)

    def test_create_user_with_role(self) -> None:
        body = AdminCreateUserRequest(
            name="Sam Seller", email="sam@mail.dev", password=PASSWORD, role=Role.STORE_OWNER
        )
        user = admin.create_user(self.db, body)
        self.assertEqual(user.role, Role.STORE_OWNER.value)
        self.assertNotEqual(user.password_hash, PASSWORD)

    def test_update_role(self) -> None:
        norm = self.db.query(User).filter(User.email == "norm@mail.dev").one()
        admin.update_user_role(self.db, norm.id, Role.SYSTEM_ADMIN)
        self.assertEqual(self.reload().get(User, norm.id).role, Role.SYSTEM_ADMIN.value)


class TestAccounts(DatabaseTestCase):
    def test_register_conflict(self) -> None:
        body = SignupRequest(name="Jane Doe", email="jane@mail.dev", password=PASSWORD)
        accounts.register_user(self.db, body, Role.NORMAL_USER)
        with self.assertRaises(ConflictError):
            accounts.register_user(self.db, body, Role.NORMAL_USER)

    def test_login_failures_share_one_message(self) -> None:
        self.make_user("jane@mail.dev")
        failures = []
        for email, password, role in (
            ("jane@mail.dev", "Wrong#Pass1", None),
            ("nobody@mail.dev", PASSWORD, None),
            ("jane@mail.dev", PASSWORD, Role.SYSTEM_ADMIN),
        ):
            with self.assertRaises(AuthenticationError) as ctx:
                accounts.authenticate(self.db, email, password, role)
            failures.append(ctx.exception.message)
        self.assertEqual(set(failures), {accounts.INVALID_CREDENTIALS})

    def test_every_failed_login_runs_one_password_check(self) -> None:
        self.make_user("jane@mail.dev")
        for email, role in (("nobody@mail.dev", None), ("jane@mail.dev", Role.SYSTEM_ADMIN)):
            with patch(
                "store_ratings.services.accounts.verify_password", return_value=False
            ) as verify:
                with self.assertRaises(AuthenticationError):
                    accounts.authenticate(self.db, email, PASSWORD, role)
            verify.assert_called_once()
            self.assertEqual(verify.call_args.args[0], PASSWORD)

    def test_refresh_rotates_token(self) -> None:
        user = self.make_user("jane@mail.dev")
        _, first = accounts.issue_tokens(self.db, user)
        _, _, second = accounts.refresh_tokens(self.db, first)
        self.assertNotEqual(first, second)
        with self.assertRaises(AuthenticationError):
            accounts.refresh_tokens(self.db, first)

    def test_password_change_requires_current_and_revokes_refresh(self) -> None:
        user = self.make_user("jane@mail.dev")
        _, refresh = accounts.issue_tokens(self.db, user)
        with self.assertRaises(AuthenticationError):
            accounts.change_password(
                self.db, user.id, PasswordChangeRequest(current_password="Nope#123", new_password="Fresh#Pass2")
            )
        accounts.change_password(
            self.db, user.id, PasswordChangeRequest(current_password=PASSWORD, new_password="Fresh#Pass2")
        )
        self.assertEqual(accounts.authenticate(self.db, "jane@mail.dev", "Fresh#Pass2").id, user.id)
        with self.assertRaises(AuthenticationError):
            accounts.refresh_tokens(self.db, refresh)


if __name__ == "__main__":
    unittest.main()
