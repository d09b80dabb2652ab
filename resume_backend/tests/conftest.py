"""
Pytest configuration to ensure the application package (src/) is importable,
plus provider fixtures shared by the API and controller tests.

This adjusts sys.path so `from src.api.main import app` works when tests run
from the container root without an installed package.
"""
import sys
from pathlib import Path

import pytest

# Compute the backend root that contains the 'src' directory
BACKEND_ROOT = Path(__file__).resolve().parents[1]

# Prepend backend root to sys.path if not already present
backend_root_str = str(BACKEND_ROOT)
if backend_root_str not in sys.path:
    sys.path.insert(0, backend_root_str)

from src.core.config import reset_settings_cache  # noqa: E402
from src.services.user_service import reset_user_store  # noqa: E402

STRONG_PASSWORD = "StrongPassw0rd!"


@pytest.fixture
def memory_provider(monkeypatch):
    """Run against the in-memory user store."""
    monkeypatch.setenv("DATA_PROVIDER", "memory")
    monkeypatch.delenv("DB_PATH", raising=False)
    reset_settings_cache()
    reset_user_store()
    yield
    reset_user_store()
    reset_settings_cache()


@pytest.fixture
def sqlite_provider(monkeypatch, tmp_path):
    """Run against a throwaway SQLite file."""
    monkeypatch.setenv("DATA_PROVIDER", "sqlite")
    monkeypatch.setenv("DB_PATH", str(tmp_path / "test.db"))
    reset_settings_cache()
    reset_user_store()
    yield tmp_path / "test.db"
    reset_settings_cache()


@pytest.fixture
def make_registration():
    """Factory fixture for camelCase registration payloads."""

    def _make(email: str = "ernesto@example.com", password: str = STRONG_PASSWORD) -> dict:
        return {
            "email": email,
            "password": password,
            "name": "Ernesto",
            "middleName": "Jose",
            "lastName": "Jara",
            "secondLastName": "Olveda",
        }

    return _make
