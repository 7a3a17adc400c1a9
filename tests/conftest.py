"""
Shared fixtures for the engine tests.

Service tests run against a fresh SQLite file per test (aiosqlite); the
environment is pointed at SQLite before any dungeon_crawl module is imported.
"""

import os
import tempfile

os.environ.setdefault("DB_BACKEND", "sqlite")
os.environ.setdefault(
    "SQLITE_PATH", os.path.join(tempfile.gettempdir(), "dungeon_crawl_test.sqlite3")
)
os.environ.setdefault("SEED_DEFAULTS", "false")

import pytest
import pytest_asyncio

from dungeon_crawl.create_sqlite_engine import create_sqlite_engine
from dungeon_crawl.db import create_session_factory
from dungeon_crawl.models.dc_models import RoomType
from dungeon_crawl.models.schemas import Base
from tests.helpers import make_room


@pytest_asyncio.fixture
async def Session(tmp_path):
    engine = create_sqlite_engine(tmp_path / "game.sqlite3")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def rooms():
    return [
        make_room(RoomType.combat, name="Ferocious goblin"),
        make_room(RoomType.search, name="Mysterious chest"),
        make_room(RoomType.combat, name="Skeleton guard"),
    ]
