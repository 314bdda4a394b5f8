"""
Database connection setup.

This module initializes the connection to the off-chain relational store
(PostgreSQL) and provides the `get_db` dependency used by the API layer.

Notes:
- The on-chain ledger is not reached from here; see `core/onchain.py`.
- `DATABASE_ECHO` logs every SQL statement. Useful in development, keep it
  off in production.
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from backend.src.core.config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO, future=True)

AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """
    Dependency to get a database session.
    """
    async with AsyncSessionLocal() as session:
        yield session
