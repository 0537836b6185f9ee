"""Unit tests for sweetshop.core.config.Settings validators."""

import unittest

from pydantic import ValidationError

from sweetshop.core.config import Settings
from tests.base import make_settings


class TestSettingsValidation(unittest.TestCase):
    def test_sqlite_and_postgres_urls_accepted(self) -> None:
        self.assertEqual(make_settings(DATABASE_URL="sqlite://").DATABASE_URL, "sqlite://")
        url = "postgresql+psycopg2://u:p@localhost:5432/sweetshop"
        self.assertEqual(make_settings(DATABASE_URL=f"  {url} ").DATABASE_URL, url)

    def test_bare_postgres_urls_pinned_to_psycopg2(self) -> None:
        for url in ("postgresql://u:p@localhost/sweetshop", "postgres://u:p@localhost/sweetshop"):
            with self.subTest(url=url):
                self.assertEqual(
                    make_settings(DATABASE_URL=url).DATABASE_URL,
                    "postgresql+psycopg2://u:p@localhost/sweetshop",
                )

    def test_default_database_url_names_installed_driver(self) -> None:
        default = Settings.model_fields["DATABASE_URL"].default
        self.assertTrue(default.startswith("postgresql+psycopg2://"))

    def test_unsupported_database_url_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(DATABASE_URL="mysql://u:p@localhost/sweetshop")

    def test_blank_jwt_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_SECRET="   ")

    def test_expire_minutes_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_EXPIRE_MINUTES=0)
        with self.assertRaises(ValidationError):
            make_settings(JWT_EXPIRE_MINUTES=10081)

    def test_log_level_normalized(self) -> None:
        self.assertEqual(make_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            make_settings(LOG_LEVEL="chatty")

    def test_api_prefix_trailing_slash_stripped(self) -> None:
        self.assertEqual(make_settings(API_PREFIX="/api/").API_PREFIX, "/api")
        with self.assertRaises(ValidationError):
            make_settings(API_PREFIX="api")

    def test_cors_origins_per_environment(self) -> None:
        self.assertEqual(make_settings(APP_ENV="dev").cors_origins, ["*"])
        prod = make_settings(APP_ENV="prod", CORS_ORIGINS="https://a.example, https://b.example")
        self.assertEqual(prod.cors_origins, ["https://a.example", "https://b.example"])


if __name__ == "__main__":
    unittest.main()
