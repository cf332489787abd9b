# Backoffice/tests/conftest.py
# @ai-rules:
# 1. [Pattern]: Centralizes sys.path setup so individual test files don't need it.
# 2. [Backend]: API fixtures run the app on the in-memory backend. PostgreSQL tests patch SimpleConnectionPool instead.
# 3. [Gotcha]: admin_client logs in with ADMIN_PASSWORD patched on backoffice.main, independent of the environment.

import sys
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from fastapi.testclient import TestClient  # noqa: E402

from backoffice.main import app  # noqa: E402

TEST_ADMIN_PASSWORD = "test-admin-password"


def days_from_now(days: int) -> datetime:
    return datetime.now() + timedelta(days=days)


@pytest.fixture
def client():
    """Anonymous client against a fresh in-memory store."""
    with patch("backoffice.main.STORE_BACKEND", "memory"), \
            patch("backoffice.main.ADMIN_PASSWORD", TEST_ADMIN_PASSWORD):
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture
def admin_client(client):
    """Same store as `client`, with an admin session cookie set."""
    response = client.post("/auth/login", json={"password": TEST_ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
