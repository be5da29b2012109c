"""Shared test setup: a throwaway SQLite database and no background jobs."""
import os
import tempfile

# Must be set before anything imports concierge.config
_db_dir = tempfile.mkdtemp(prefix="concierge-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'concierge.db')}"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["EMAIL_BACKEND"] = "console"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient

from concierge import database as db
from concierge import tables


@pytest.fixture(autouse=True)
def fresh_schema():
    """Every test starts from empty tables"""
    tables.metadata.drop_all(db.engine)
    tables.metadata.create_all(db.engine)
    yield


@pytest.fixture
def client():
    from concierge.api.server import app

    with TestClient(app) as test_client:
        yield test_client
