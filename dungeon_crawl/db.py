from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from dungeon_crawl.load_secrets import db_backend

if db_backend == "sqlite":
    from dungeon_crawl.create_sqlite_engine import engine
else:
    from dungeon_crawl.create_postgres_engine import engine


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    """Build the session factory used by the service layer."""
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        expire_on_commit=False,
        bind=bind,
    )


# Centralized session factory to avoid creating it in router modules.
Session = create_session_factory(engine)
