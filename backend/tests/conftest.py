"""
SnippetBox Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file under pytest's tmp_path, so tests
       never share rows and never touch data/snippetbox.db.

       Row fixtures hand out plain ids, not ORM objects: a rolled-back
       transaction expires every instance in the session.

Fixture Hierarchy (all function-scoped):
    database ──┬── session ──┬── alice_id / bob_id, python_language_id
               │             └── snippet_repo, taxonomy_repo
               └── app ── test_client ── auth_headers (registered user)
"""

import os

# Override settings for testing BEFORE any snippetbox imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./data/test-unused.db"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"  # minimum cost keeps hashing fast
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["AUTO_CREATE_SCHEMA"] = "false"

from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.database import Database
from snippetbox.repositories import SnippetRepository, TaxonomyRepository, UserRepository


# ══════════════════════════════════════════════════════════════════════════
# Store Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A fresh schema in a temporary SQLite file."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'snippetbox-test.db'}")
    await db.create_schema()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as s:
        yield s


@pytest_asyncio.fixture
async def alice_id(session: AsyncSession) -> int:
    user = await UserRepository(session).register("alice", "alice@example.com", "wonderland")
    return user.id


@pytest_asyncio.fixture
async def bob_id(session: AsyncSession) -> int:
    user = await UserRepository(session).register("bob", "bob@example.com", "builder")
    return user.id


@pytest_asyncio.fixture
async def python_language_id(session: AsyncSession) -> int:
    language = await TaxonomyRepository(session).create_language("Python")
    return language.id


@pytest.fixture
def snippet_repo(session: AsyncSession) -> SnippetRepository:
    return SnippetRepository(session)


@pytest.fixture
def taxonomy_repo(session: AsyncSession) -> TaxonomyRepository:
    return TaxonomyRepository(session)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(database: Database):
    """An application wired to the temporary database."""
    from snippetbox.main import create_app
    return create_app(database=database)


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _register(client: AsyncClient, username: str, email: str, password: str = "secret-pw") -> Dict[str, str]:
    """Register through the API and return Authorization headers for that user."""
    response = await client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture
async def auth_headers(test_client: AsyncClient) -> Dict[str, str]:
    return await _register(test_client, "alice", "alice@example.com")


@pytest_asyncio.fixture
async def other_headers(test_client: AsyncClient) -> Dict[str, str]:
    return await _register(test_client, "bob", "bob@example.com")
