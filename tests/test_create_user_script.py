"""Tests for the admin bootstrap CLI (python -m sweetshop.scripts.create_user)."""

import os
import tempfile
import unittest
from contextlib import redirect_stderr
from io import StringIO
from unittest.mock import patch

from sweetshop.core.database import Database
from sweetshop.core.security import verify_password
from sweetshop.models import User
from sweetshop.scripts import create_user as script
from tests.base import make_settings


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        path = os.path.join(self.tmpdir.name, "sweetshop.db")
        self.settings = make_settings(DATABASE_URL=f"sqlite:///{path}")
        self.database = Database.from_settings(self.settings)
        self.database.create_all()
        patcher = patch.object(script, "get_settings", return_value=self.settings)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self.database.dispose()
        self.tmpdir.cleanup()

    def _users(self) -> list[User]:
        db = self.database.session()
        try:
            return db.query(User).order_by(User.id).all()
        finally:
            db.close()

    def test_creates_admin_with_hashed_password(self) -> None:
        code = script.main(["admin", "admin@example.com", "s3cret-pw", "admin"])
        self.assertEqual(code, 0)
        users = self._users()
        self.assertEqual(len(users), 1)
        self.assertEqual(users[0].role, "admin")
        self.assertEqual(users[0].email, "admin@example.com")
        self.assertNotEqual(users[0].password_hash, "s3cret-pw")
        self.assertTrue(verify_password("s3cret-pw", users[0].password_hash))

    def test_role_defaults_to_user(self) -> None:
        self.assertEqual(script.main(["bob", "bob@example.com", "s3cret-pw"]), 0)
        self.assertEqual(self._users()[0].role, "user")

    def test_duplicate_fails(self) -> None:
        self.assertEqual(script.main(["admin", "admin@example.com", "s3cret-pw", "admin"]), 0)
        with redirect_stderr(StringIO()) as err:
            code = script.main(["admin", "other@example.com", "s3cret-pw", "admin"])
        self.assertEqual(code, 1)
        self.assertIn("already exists", err.getvalue())
        self.assertEqual(len(self._users()), 1)

    def test_invalid_input_fails_without_writing(self) -> None:
        with redirect_stderr(StringIO()):
            code = script.main(["ab", "admin@example.com", "s3cret-pw"])
        self.assertEqual(code, 1)
        self.assertEqual(self._users(), [])


if __name__ == "__main__":
    unittest.main()
