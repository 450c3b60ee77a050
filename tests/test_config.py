"""Unit tests for tasktrack.core.config validators."""

import unittest

from pydantic import ValidationError

from tasktrack.core.config import Settings


class TestSettingsValidation(unittest.TestCase):
    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        self.assertEqual(s.API_V1_PREFIX, "/api/v1")
        self.assertEqual(s.JWT_ALGORITHM, "HS256")

    def test_sqlite_url_accepted(self) -> None:
        s = Settings(_env_file=None, DATABASE_URL=" sqlite:///./tasktrack.db ")
        self.assertEqual(s.DATABASE_URL, "sqlite:///./tasktrack.db")

    def test_unsupported_database_url(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, DATABASE_URL="mysql://root@localhost/tasks")

    def test_empty_jwt_secret(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET="   ")

    def test_expire_minutes_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_EXPIRE_MINUTES=0)
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_EXPIRE_MINUTES=10081)

    def test_log_level_normalized(self) -> None:
        self.assertEqual(Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="chatty")

    def test_statement_timeout_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, DB_STATEMENT_TIMEOUT_MS=0)
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, DB_POOL_TIMEOUT_SEC=0)


if __name__ == "__main__":
    unittest.main()
