"""Service test fixtures: file-backed SQLite DB + FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file in tmp_path
    - The module-level db_manager is swapped for the test manager, so get_db
      and the readiness probe use the same database the test inspects
    - Subjects are seeded per test (reference data normally seeded by migration)

Design Decisions:
    - File-backed, not :memory:: concurrent sessions need separate connections
      contending on a real database lock
"""

import pytest
from httpx import ASGITransport, AsyncClient

from studyhub.db.base import Base
from studyhub.infrastructure.database import DatabaseSessionManager
import studyhub.infrastructure.database as db_module
import studyhub.models  # noqa: F401
from studyhub.models.subject import Subject
from studyhub.main import app
from tests.services.api_helpers import register


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'studyhub-test.db'}", lock_timeout=15.0,
    )
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    original_manager = db_module.db_manager
    db_module.db_manager = manager
    yield manager
    db_module.db_manager = original_manager
    await manager.close()


@pytest.fixture
async def client(db_manager):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def subjects(db_manager) -> dict[str, int]:
    """Seed reference subjects; returns name -> id."""
    async with db_manager.session() as db:
        rows = [Subject(name=n) for n in ("Physics", "Mathematics", "Chemistry")]
        db.add_all(rows)
        await db.commit()
        return {s.name: s.id for s in rows}


@pytest.fixture
async def alice(client):
    return await register(client, "alice@example.com", "Alice")


@pytest.fixture
async def bob(client):
    return await register(client, "bob@example.com", "Bob")
