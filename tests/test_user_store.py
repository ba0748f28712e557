"""Tests for app.services.user_store.UserStore against an in-memory SQLite database."""

import unittest
from datetime import UTC, datetime, timedelta

from app.core.database import Database
from app.core.errors import ConflictError
from app.models import User
from app.services.user_store import UserStore, normalize_email


def _user(email: str = "alice@x.com", name: str = "Alice") -> User:
    return User(name=name, email=email, password_hash="hash", role="user", phone="", addresses=[])


class StoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.database = Database("sqlite://")
        self.database.create_all()
        self.session = self.database.SessionLocal()
        self.store = UserStore(self.session)
        self.expires = datetime.now(UTC) + timedelta(days=7)

    def tearDown(self) -> None:
        self.session.close()
        self.database.dispose()


class TestUsers(StoreTestCase):
    """User lookup, uniqueness and deletion."""

    def test_normalize_email(self) -> None:
        self.assertEqual(normalize_email("  Alice@X.COM "), "alice@x.com")

    def test_create_assigns_opaque_id_and_lowercases_email(self) -> None:
        user = self.store.create(_user(email="Alice@X.com"))
        self.store.commit()
        self.assertTrue(user.id)
        self.assertEqual(user.email, "alice@x.com")
        self.assertIsNotNone(user.created_at)

    def test_find_by_email_is_case_insensitive(self) -> None:
        user = self.store.create(_user())
        self.store.commit()
        self.assertEqual(self.store.find_by_email("ALICE@x.com").id, user.id)
        self.assertIsNone(self.store.find_by_email("bob@x.com"))

    def test_duplicate_email_raises_conflict(self) -> None:
        self.store.create(_user())
        self.store.commit()
        with self.assertRaises(ConflictError):
            self.store.create(_user(email="ALICE@X.COM", name="Other Alice"))
        self.assertEqual(len(self.store.list_users()), 1)

    def test_delete_removes_refresh_tokens(self) -> None:
        user = self.store.create(_user())
        self.store.add_refresh_token(user.id, "tok-a", self.expires)
        self.store.add_refresh_token(user.id, "tok-b", self.expires)
        self.store.commit()
        user_id = user.id

        self.store.delete(self.store.find_by_id(user_id))
        self.store.commit()
        self.assertIsNone(self.store.find_by_id(user_id))
        self.assertEqual(self.store.refresh_tokens_for(user_id), [])
        self.assertIsNone(self.store.find_by_refresh_token("tok-a"))


class TestRefreshTokens(StoreTestCase):
    """Token set membership, conditional consumption and pruning."""

    def setUp(self) -> None:
        super().setUp()
        self.user = self.store.create(_user())
        self.store.commit()

    def test_tokens_listed_in_insertion_order(self) -> None:
        for token in ("tok-1", "tok-2", "tok-3"):
            self.store.add_refresh_token(self.user.id, token, self.expires)
        self.store.commit()
        self.assertEqual(self.store.refresh_tokens_for(self.user.id), ["tok-1", "tok-2", "tok-3"])

    def test_find_by_refresh_token(self) -> None:
        self.store.add_refresh_token(self.user.id, "tok-1", self.expires)
        self.store.commit()
        self.assertEqual(self.store.find_by_refresh_token("tok-1").id, self.user.id)
        self.assertIsNone(self.store.find_by_refresh_token("tok-unknown"))

    def test_consume_succeeds_only_once(self) -> None:
        self.store.add_refresh_token(self.user.id, "tok-1", self.expires)
        self.store.commit()
        self.assertTrue(self.store.consume_refresh_token(self.user.id, "tok-1"))
        self.store.commit()
        self.assertFalse(self.store.consume_refresh_token(self.user.id, "tok-1"))

    def test_consume_requires_matching_owner(self) -> None:
        other = self.store.create(_user(email="bob@x.com", name="Bob"))
        self.store.add_refresh_token(self.user.id, "tok-1", self.expires)
        self.store.commit()
        self.assertFalse(self.store.consume_refresh_token(other.id, "tok-1"))
        self.assertEqual(self.store.refresh_tokens_for(self.user.id), ["tok-1"])

    def test_remove_is_idempotent(self) -> None:
        self.store.add_refresh_token(self.user.id, "tok-1", self.expires)
        self.store.commit()
        self.assertEqual(self.store.remove_refresh_token(self.user.id, "tok-1"), 1)
        self.assertEqual(self.store.remove_refresh_token(self.user.id, "tok-1"), 0)
        self.store.commit()
        self.assertEqual(self.store.refresh_tokens_for(self.user.id), [])

    def test_delete_expired(self) -> None:
        now = datetime.now(UTC)
        self.store.add_refresh_token(self.user.id, "tok-old", now - timedelta(minutes=1))
        self.store.add_refresh_token(self.user.id, "tok-new", self.expires)
        self.assertEqual(self.store.delete_expired_refresh_tokens(self.user.id, now), 1)
        self.store.commit()
        self.assertEqual(self.store.refresh_tokens_for(self.user.id), ["tok-new"])

    def test_evict_oldest_keeps_newest(self) -> None:
        for token in ("tok-1", "tok-2", "tok-3", "tok-4"):
            self.store.add_refresh_token(self.user.id, token, self.expires)
        self.assertEqual(self.store.evict_oldest_refresh_tokens(self.user.id, keep=2), 2)
        self.assertEqual(self.store.evict_oldest_refresh_tokens(self.user.id, keep=2), 0)
        self.store.commit()
        self.assertEqual(self.store.refresh_tokens_for(self.user.id), ["tok-3", "tok-4"])


if __name__ == "__main__":
    unittest.main()
