"""Unit tests for app.core.security: bcrypt hashing and the access/refresh token issuer."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from app.core.config import Settings
from app.core.security import (
    TOKEN_TYPE_ACCESS,
    TOKEN_TYPE_REFRESH,
    decode_access_token,
    decode_refresh_token,
    hash_password,
    issue_token_pair,
    verify_password,
)


def _settings(**overrides: object) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": "unit-access-secret",
        "JWT_REFRESH_SECRET": "unit-refresh-secret",
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestPasswordHashing(unittest.TestCase):
    """hash_password/verify_password round trip and failure modes."""

    def test_verify_matches_original_password(self) -> None:
        hashed = hash_password("pw123", rounds=4)
        self.assertNotEqual(hashed, "pw123")
        self.assertTrue(verify_password("pw123", hashed))

    def test_verify_rejects_wrong_password(self) -> None:
        hashed = hash_password("pw123", rounds=4)
        self.assertFalse(verify_password("pw124", hashed))

    def test_same_password_hashes_differently(self) -> None:
        self.assertNotEqual(hash_password("pw123", rounds=4), hash_password("pw123", rounds=4))

    def test_malformed_hash_is_false_not_error(self) -> None:
        self.assertFalse(verify_password("pw123", "not-a-bcrypt-hash"))


class TestIssueTokenPair(unittest.TestCase):
    """issue_token_pair builds two independently signed tokens."""

    def setUp(self) -> None:
        self.settings = _settings()

    def test_claims_carry_subject_role_and_type(self) -> None:
        pair = issue_token_pair("user-1", "admin", self.settings)
        access = decode_access_token(pair.access_token, self.settings)
        refresh = decode_refresh_token(pair.refresh_token, self.settings)
        self.assertEqual(access["sub"], "user-1")
        self.assertEqual(access["role"], "admin")
        self.assertEqual(access["type"], TOKEN_TYPE_ACCESS)
        self.assertEqual(refresh["sub"], "user-1")
        self.assertEqual(refresh["role"], "admin")
        self.assertEqual(refresh["type"], TOKEN_TYPE_REFRESH)

    def test_expiries_are_one_hour_and_seven_days(self) -> None:
        pair = issue_token_pair("user-1", "user", self.settings)
        access = decode_access_token(pair.access_token, self.settings)
        refresh = decode_refresh_token(pair.refresh_token, self.settings)
        self.assertEqual(access["exp"] - access["iat"], 3600)
        self.assertEqual(refresh["exp"] - refresh["iat"], 7 * 24 * 3600)
        self.assertEqual(int(pair.refresh_expires_at.timestamp()), refresh["exp"])

    def test_pairs_issued_back_to_back_differ(self) -> None:
        first = issue_token_pair("user-1", "user", self.settings)
        second = issue_token_pair("user-1", "user", self.settings)
        self.assertNotEqual(first.access_token, second.access_token)
        self.assertNotEqual(first.refresh_token, second.refresh_token)

    def test_access_token_is_not_accepted_as_refresh(self) -> None:
        pair = issue_token_pair("user-1", "user", self.settings)
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_refresh_token(pair.access_token, self.settings)

    def test_refresh_token_is_not_accepted_as_access(self) -> None:
        pair = issue_token_pair("user-1", "user", self.settings)
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(pair.refresh_token, self.settings)


class TestDecodeRejections(unittest.TestCase):
    """decode_* raise jwt.PyJWTError for anything not freshly issued by us."""

    def setUp(self) -> None:
        self.settings = _settings()

    def _token(self, secret: str, **claims: object) -> str:
        payload = {
            "sub": "user-1",
            "role": "user",
            "type": TOKEN_TYPE_ACCESS,
            "exp": datetime.now(UTC) + timedelta(minutes=5),
        }
        payload.update(claims)
        return jwt.encode(payload, secret, algorithm="HS256")

    def test_expired_token(self) -> None:
        token = self._token("unit-access-secret", exp=datetime.now(UTC) - timedelta(seconds=5))
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token, self.settings)

    def test_wrong_secret(self) -> None:
        token = self._token("someone-elses-secret")
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(token, self.settings)

    def test_wrong_token_type_with_right_key(self) -> None:
        token = self._token("unit-access-secret", type=TOKEN_TYPE_REFRESH)
        with self.assertRaises(jwt.InvalidTokenError):
            decode_access_token(token, self.settings)

    def test_missing_exp_claim(self) -> None:
        token = jwt.encode(
            {"sub": "user-1", "role": "user", "type": TOKEN_TYPE_ACCESS},
            "unit-access-secret",
            algorithm="HS256",
        )
        with self.assertRaises(jwt.MissingRequiredClaimError):
            decode_access_token(token, self.settings)

    def test_garbage(self) -> None:
        with self.assertRaises(jwt.DecodeError):
            decode_access_token("not.a.jwt", self.settings)


if __name__ == "__main__":
    unittest.main()
