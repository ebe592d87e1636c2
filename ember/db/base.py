from sqlalchemy import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from ember.config import settings

Base = declarative_base()


def build_engine(
    database_path: str = settings.DATABASE_PATH, echo: bool = settings.SQL_ECHO
) -> AsyncEngine:
    return create_async_engine(
        URL.create(drivername="sqlite+aiosqlite", database=database_path),
        echo=echo,
    )


def build_session_factory(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine()
async_session_factory = build_session_factory(engine)


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create all tables that do not exist yet"""
    # Registers the tables on Base.metadata
    import ember.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
