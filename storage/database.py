"""
Ledger tables and connection management using SQLAlchemy async.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from sqlalchemy import Column, DateTime, String, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

# Setup logging
logger = logging.getLogger(__name__)

Base = declarative_base()


class StorageError(Exception):
    """Base ledger storage error."""
    pass


class DuplicateAnnouncementError(StorageError):
    """A video was recorded as announced more than once."""
    pass


class AnnouncedVideo(Base):
    """Videos that have already been posted to the webhook."""

    __tablename__ = "videos_posted"
    __table_args__ = {"sqlite_with_rowid": False}

    id = Column(String, primary_key=True)
    date_posted = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<AnnouncedVideo(id={self.id}, date_posted={self.date_posted})>"


class ChannelCheckMark(Base):
    """Channels scanned within the recheck interval."""

    __tablename__ = "channel_check_times"
    __table_args__ = {"sqlite_with_rowid": False}

    id = Column(String, primary_key=True)
    date_checked = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<ChannelCheckMark(id={self.id}, date_checked={self.date_checked})>"


class DatabaseManager:
    """Manages the ledger engine, schema bootstrap and sessions."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.async_session_factory = None

    async def init_database(self) -> None:
        """Open the store and create tables if required."""
        try:
            if self.engine is None:
                self.engine = create_async_engine(
                    self.database_url,
                    echo=self.echo,
                    poolclass=StaticPool if "sqlite" in self.database_url else None,
                    connect_args={"check_same_thread": False} if "sqlite" in self.database_url else {}
                )
                self.async_session_factory = async_sessionmaker(
                    self.engine,
                    class_=AsyncSession,
                    expire_on_commit=False
                )

            logger.debug("Creating ledger tables if required")
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to initialize ledger at {self.database_url}: {e}") from e

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Get a session that commits on success and rolls back on error."""
        if not self.async_session_factory:
            await self.init_database()

        async with self.async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def vacuum(self) -> None:
        """Rebuild the database file to release free pages."""
        if not self.engine:
            await self.init_database()

        async with self.engine.connect() as conn:
            conn = await conn.execution_options(isolation_level="AUTOCOMMIT")
            await conn.execute(text("VACUUM"))

    async def table_names(self) -> List[str]:
        """List the tables present in the store."""
        if not self.engine:
            await self.init_database()

        async with self.engine.connect() as conn:
            return await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    async def close(self) -> None:
        """Close database connections."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.async_session_factory = None
