import asyncio
import os
import sys
import uuid
from typing import Optional

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from fastapi.testclient import TestClient

# Ensure project root is importable
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

TEST_DB_PATH = os.path.join(project_root, "test.db")

# Load .env, then FORCE the test configuration regardless of its contents
load_dotenv()
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
# Empty values win over .env and keep both AI adapters in fallback mode
os.environ["HF_API_KEY"] = ""
os.environ["GROQ_API_KEY"] = ""

PASSWORD = "Str0ngPassword"


# Initialize the database schema once per test session
@pytest.fixture(scope="session", autouse=True)
def _init_db_once():
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)

    # Delay import until after environment is configured
    from mindjournal import database
    asyncio.run(database.init_db_async())
    yield


@pytest.fixture()
def client():
    from mindjournal.main import app
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def register_user(client: TestClient, username: Optional[str] = None) -> dict:
    """Register a fresh user; returns the response body plus ready-made auth headers."""
    username = username or f"user_{uuid.uuid4().hex[:10]}"
    resp = client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
        },
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    body["headers"] = {"Authorization": f"Bearer {body['token']}"}
    return body


@pytest.fixture()
def register(client):
    return lambda username=None: register_user(client, username)


@pytest_asyncio.fixture
async def owner_id():
    """A persisted user id for tests that talk to crud/services directly."""
    from mindjournal import crud

    name = f"owner_{uuid.uuid4().hex[:10]}"
    user = await crud.create_user(name, f"{name}@example.com", "not-a-real-hash")
    return user.id
