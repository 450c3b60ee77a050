"""Tests for tasktrack.core.security: password hashing and token claims."""

import unittest

from tasktrack.core.security import (
    BCRYPT_MAX_BYTES,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from tests.support import PASSWORD, PASSWORD_HASH


class TestPasswords(unittest.TestCase):
    def test_stored_hash_is_not_the_password(self) -> None:
        self.assertNotIn(PASSWORD, PASSWORD_HASH)
        self.assertTrue(verify_password(PASSWORD, PASSWORD_HASH))
        self.assertFalse(verify_password(PASSWORD + "!", PASSWORD_HASH))

    def test_malformed_hash_never_matches(self) -> None:
        self.assertFalse(verify_password(PASSWORD, "not-a-bcrypt-hash"))

    def test_bytes_past_the_bcrypt_limit_are_ignored(self) -> None:
        stored = hash_password("a" * BCRYPT_MAX_BYTES)
        self.assertTrue(verify_password("a" * BCRYPT_MAX_BYTES + "tail", stored))


class TestAccessToken(unittest.TestCase):
    def test_claims(self) -> None:
        payload = decode_access_token(create_access_token(sub=42, role="admin"))
        self.assertEqual(payload["sub"], "42")
        self.assertEqual(payload["role"], "admin")
        self.assertGreater(payload["exp"], payload["iat"])


if __name__ == "__main__":
    unittest.main()
