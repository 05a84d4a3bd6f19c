import os
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# FORCE TESTING MODE
# Must be set BEFORE importing app.main so settings and the engine
# pick up an in-memory SQLite database.
# ------------------------------------------------------------------
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SMTP_HOST"] = ""
os.environ.pop("REDIS_URL", None)
os.environ.pop("SUPABASE_URL", None)

from app.main import app  # noqa: E402
from app.core.database import AsyncSessionLocal, drop_db, init_db  # noqa: E402
from app.core.policy import Role  # noqa: E402
from app.services.auth_service import create_login_response, create_user  # noqa: E402


@pytest_asyncio.fixture
async def db():
    """Fresh schema for every test (startup events do not run under ASGITransport)."""
    await init_db()
    yield
    await drop_db()


@pytest_asyncio.fixture
async def session(db):
    async with AsyncSessionLocal() as s:
        yield s


@pytest_asyncio.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
async def make_user(session):
    """
    Factory: ``await make_user("asha", role=Role.Student, is_committee=True, ...)``
    returns ``(user, auth_headers)``.
    """
    async def _make(username, role=Role.Student, password="password123", **profile):
        user = await create_user(session, username=username, password=password, role=role, **profile)
        token = create_login_response(user).access_token
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user("admin", role=Role.Admin, email="admin@example.com")


@pytest_asyncio.fixture
async def student(make_user):
    return await make_user(
        "student1",
        role=Role.Student,
        email="student1@example.com",
        full_name="Student One",
        department="IT/CME",
        year=2,
    )
