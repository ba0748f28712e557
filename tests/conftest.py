"""Test environment: in-memory SQLite and fast bcrypt, set before the app module is imported."""

import os

os.environ.setdefault("APP_ENV", "dev")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "false"
