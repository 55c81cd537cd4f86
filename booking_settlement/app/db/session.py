"""
Database engine and sessions.

One async engine per process. Request handlers get a session from `get_db`;
writes are committed by `UnitOfWork`, never by the dependency itself.
"""

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from booking_settlement.app.core.config import settings

# Stable names for unnamed indexes and constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

SettlementSession = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))


async def get_db():
    """
    FastAPI dependency for database sessions.

    Anything left uncommitted when the request ends is rolled back.
    """
    async with SettlementSession() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()
