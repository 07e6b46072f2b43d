"""Shared fixtures for the test suite."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from goalboard.db import create_all
from goalboard.deps import get_store
from goalboard.kanban.memory_store import MemoryStore
from goalboard.kanban.models import BoardCreate, GoalCreate
from goalboard.kanban.sql_store import SqlStore
from goalboard.kanban.store import Store
from goalboard.main import app


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

@pytest.fixture()
def memory_store():
    """Return an empty MemoryStore."""
    return MemoryStore()


async def _sqlite_store() -> SqlStore:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await create_all(engine)
    return SqlStore(engine)


@pytest.fixture()
async def sql_store():
    """SqlStore over a private in-memory SQLite database."""
    store = await _sqlite_store()
    yield store
    await store.close()


@pytest.fixture(params=["memory", "sql"])
async def store(request):
    """Run a test once per backend."""
    if request.param == "memory":
        yield MemoryStore()
        return
    store = await _sqlite_store()
    yield store
    await store.close()


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest.fixture()
def override_store(memory_store):
    """Override the FastAPI dependency so every request hits memory_store."""
    app.dependency_overrides[get_store] = lambda: memory_store
    yield memory_store
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_store):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

async def make_board(store: Store, title: str = "Board", goals: int = 0):
    """Create a board and put ``goals`` goals in its first column.

    Returns (board, columns, goals) with goals in position order.
    """
    board = await store.create_board(BoardCreate(title=title))
    columns = await store.list_columns(board.id)
    created = []
    for index in range(goals):
        created.append(
            await store.create_goal(
                GoalCreate(
                    board_id=board.id,
                    column_id=columns[0].id,
                    title=f"Goal {index}",
                    assignee="JD",
                )
            )
        )
    return board, columns, created


async def positions(store: Store, column_id: str) -> list[tuple[str, int]]:
    return [(g.id, g.position) for g in await store.list_goals_by_column(column_id)]
