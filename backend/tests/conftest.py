import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from basis_planner.core.config import Settings
from basis_planner.core.database import create_engine, create_schema, create_sessionmaker
from basis_planner.core.seed import seed_defaults
from basis_planner.main import create_app

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-secret"


def login(client: TestClient, username: str, password: str):
    return client.post("/api/auth/login", json={"username": username, "password": password})


@pytest.fixture()
def app_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_PATH=str(tmp_path / "planner.db"),
        AUDIT_LOG_FILE=str(tmp_path / "server.log"),
        ADMIN_USERNAME=ADMIN_USERNAME,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        RATE_LIMIT_ENABLED=True,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture()
def client(app_settings: Settings):
    with TestClient(create_app(app_settings)) as c:
        yield c


@pytest.fixture()
def admin_client(client: TestClient) -> TestClient:
    r = login(client, ADMIN_USERNAME, ADMIN_PASSWORD)
    assert r.status_code == 200, r.text
    return client


@pytest.fixture()
def viewer(admin_client: TestClient) -> dict:
    """A read-only user; the client stays logged in as admin."""
    creds = {"username": "viewer", "password": "viewer-pass", "role": "user"}
    r = admin_client.post("/api/users", json=creds)
    assert r.status_code == 200, r.text
    return {**creds, "id": r.json()["id"]}


@pytest_asyncio.fixture()
async def sessionmaker(app_settings: Settings):
    engine = create_engine(app_settings.database_url)
    await create_schema(engine)
    factory = create_sessionmaker(engine)
    await seed_defaults(factory, app_settings)
    yield factory
    await engine.dispose()
