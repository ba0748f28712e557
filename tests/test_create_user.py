"""Tests for the create_user bootstrap script."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout

from app.core.database import Database
from app.core.security import verify_password
from app.scripts.create_user import main
from app.services.user_store import UserStore


class TestCreateUser(unittest.TestCase):
    def setUp(self) -> None:
        self.database = Database("sqlite://")
        self.database.create_all()

    def tearDown(self) -> None:
        self.database.dispose()

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv), database=self.database)
        return code, out.getvalue(), err.getvalue()

    def test_creates_admin(self) -> None:
        code, out, _ = self._run("Ada", "Ada@Example.com", "s3cret", "admin")
        self.assertEqual(code, 0)
        self.assertIn("admin", out)
        with self.database.SessionLocal() as session:
            user = UserStore(session).find_by_email("ada@example.com")
            self.assertEqual(user.role, "admin")
            self.assertEqual(user.name, "Ada")
            self.assertTrue(verify_password("s3cret", user.password_hash))

    def test_default_role_is_user(self) -> None:
        self.assertEqual(self._run("Bob", "bob@example.com", "pw")[0], 0)
        with self.database.SessionLocal() as session:
            self.assertEqual(UserStore(session).find_by_email("bob@example.com").role, "user")

    def test_duplicate_email_fails(self) -> None:
        self._run("Ada", "ada@example.com", "pw")
        code, _, err = self._run("Ada Again", "ADA@example.com", "pw")
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)

    def test_invalid_input_fails(self) -> None:
        self.assertEqual(self._run("  ", "ada@example.com", "pw")[0], 1)
        self.assertEqual(self._run("Ada", "not-an-email", "pw")[0], 1)
        self.assertEqual(self._run("Ada", "ada@example.com", "x" * 200)[0], 1)


if __name__ == "__main__":
    unittest.main()
