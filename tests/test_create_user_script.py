"""Tests for the create_user command-line script."""

import unittest
from unittest.mock import patch

from store_ratings.models import User
from store_ratings.scripts import create_user
from tests.support import PASSWORD, DatabaseTestCase, TestingSessionLocal


@patch("store_ratings.scripts.create_user.SessionLocal", TestingSessionLocal)
class TestCreateUserScript(DatabaseTestCase):
    def test_creates_admin_by_default(self) -> None:
        code = create_user.main(["Site Admin", "admin@mail.dev", PASSWORD])
        self.assertEqual(code, 0)
        user = self.reload().query(User).filter(User.email == "admin@mail.dev").one()
        self.assertEqual(user.role, "SYSTEM_ADMIN")

    def test_explicit_role_and_address(self) -> None:
        code = create_user.main(["Sam Seller", "sam@mail.dev", PASSWORD, "STORE_OWNER", "--address", "2 Dock"])
        self.assertEqual(code, 0)
        user = self.reload().query(User).filter(User.email == "sam@mail.dev").one()
        self.assertEqual((user.role, user.address), ("STORE_OWNER", "2 Dock"))

    def test_weak_password_rejected(self) -> None:
        self.assertEqual(create_user.main(["Site Admin", "admin@mail.dev", "weak"]), 1)
        self.assertEqual(self.reload().query(User).count(), 0)

    def test_existing_email_rejected(self) -> None:
        self.make_user("admin@mail.dev")
        self.assertEqual(create_user.main(["Site Admin", "admin@mail.dev", PASSWORD]), 1)


if __name__ == "__main__":
    unittest.main()
