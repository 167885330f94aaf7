"""Root conftest — shared test configuration."""

import os

# Cheap hashing and a throwaway database for every test run
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")
