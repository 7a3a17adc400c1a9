import pathlib

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from dungeon_crawl.load_secrets import sqlite_path


def create_sqlite_engine(file_path: str | pathlib.Path) -> AsyncEngine:
    """Create an aiosqlite engine for a database file (created on first connect)."""
    sqlite_url = f"sqlite+aiosqlite:///{pathlib.Path(file_path)}"
    return create_async_engine(url=sqlite_url, echo=False)


engine = create_sqlite_engine(sqlite_path)
