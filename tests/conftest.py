"""
Pytest fixtures for UserHub tests.
"""

import os

TEST_SECRET = "test-secret-key-for-testing-only-0123456789"

# The app module builds settings at import time and refuses to start without a secret
os.environ.setdefault("JWT_SECRET", TEST_SECRET)

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from userhub.api.deps import get_services  # noqa: E402
from userhub.config import Settings  # noqa: E402
from userhub.database import Database  # noqa: E402
from userhub.kernel.activity import InMemoryActivityLog  # noqa: E402
from userhub.kernel.identity import IdentityService, RequestContext, TokenClaims, TokenService  # noqa: E402
from userhub.kernel.repositories import InMemoryUserRepository  # noqa: E402
from userhub.kernel.storage import InMemoryObjectStore  # noqa: E402
from userhub.main import create_app  # noqa: E402
from userhub.schemas.users import UserCreate  # noqa: E402
from userhub.services import AppServices  # noqa: E402


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        _env_file=None,
        jwt_secret=TEST_SECRET,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'userhub_test.db'}",
        environment="test",
    )


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret_key=TEST_SECRET, algorithm="HS256", expire_days=7)


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def activity_log() -> InMemoryActivityLog:
    return InMemoryActivityLog()


@pytest.fixture
def identity_service(
    user_repository: InMemoryUserRepository,
    token_service: TokenService,
    object_store: InMemoryObjectStore,
    activity_log: InMemoryActivityLog,
) -> IdentityService:
    return IdentityService(
        users=user_repository,
        tokens=token_service,
        object_store=object_store,
        activity_log=activity_log,
    )


@pytest.fixture
def admin_context() -> RequestContext:
    """Identity of the caller performing directory actions."""
    return RequestContext(user_id="admin-id", email="admin@example.com")


@pytest.fixture
def ana_payload() -> dict:
    return {
        "firstName": "Ana",
        "lastName": "Silva",
        "birthDay": "1990-01-01",
        "email": "ana@x.com",
        "password": "secret1",
    }


@pytest.fixture
def ana(ana_payload: dict) -> UserCreate:
    return UserCreate.model_validate(ana_payload)


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """SQLite database with tables created."""
    db = Database(settings.database_url)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def app(
    settings: Settings,
    database: Database,
    token_service: TokenService,
    object_store: InMemoryObjectStore,
    activity_log: InMemoryActivityLog,
) -> FastAPI:
    """Application wired to the real SQL store, in-memory object store and activity log."""
    app = create_app(settings)
    services = AppServices(
        database=database,
        token_service=token_service,
        object_store=object_store,
        activity_log=activity_log,
    )
    app.dependency_overrides[get_services] = lambda: services
    return app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """In-process client over the wired application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(token_service: TokenService, admin_context: RequestContext) -> dict:
    """Bearer header for the admin caller. Tokens are stateless, no stored user needed."""
    token = token_service.issue(TokenClaims(id=admin_context.user_id, email=admin_context.email))
    return {"Authorization": f"Bearer {token}"}
