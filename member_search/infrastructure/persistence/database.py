from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from member_search.infrastructure.config.settings import Settings
from member_search.infrastructure.persistence.models import table_registry


class _EngineStore:
    engine: Optional[AsyncEngine] = None
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def set_engine(engine: AsyncEngine) -> None:
    """Install ``engine`` and a matching session factory, replacing any previous pair."""
    _EngineStore.engine = engine
    _EngineStore.session_factory = async_sessionmaker(engine, expire_on_commit=False)


def get_engine(settings: Optional[Settings] = None) -> AsyncEngine:
    if _EngineStore.engine is None:
        settings = settings or Settings()
        set_engine(create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO))
    return _EngineStore.engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    get_engine()
    return _EngineStore.session_factory


async def get_session():
    async with get_session_factory()() as session:
        yield session


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(table_registry.metadata.create_all)


async def drop_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(table_registry.metadata.drop_all)


async def dispose_engine() -> None:
    if _EngineStore.engine is not None:
        await _EngineStore.engine.dispose()
    _EngineStore.engine = None
    _EngineStore.session_factory = None
