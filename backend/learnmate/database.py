import os
from typing import AsyncGenerator

from learnmate.config import settings
from learnmate.utils.time import utcnow

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

DATABASE_URL = settings.database_url

# Create async engine
engine = create_async_engine(DATABASE_URL, echo=False)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class SummaryRecord(Base):
    """A saved learning session: topic, steps with completion state, progress."""

    __tablename__ = "learning_summaries"

    id = Column(String(100), primary_key=True)  # Client-assigned id
    topic = Column(String(500), nullable=False)
    date = Column(DateTime, nullable=False, index=True)  # Last save time, naive UTC
    steps = Column(Text, nullable=False, default="[]")  # orjson-encoded list of session steps
    progress = Column(Integer, default=0, nullable=False)  # 0-100
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<SummaryRecord(id='{self.id}', topic='{self.topic}', progress={self.progress})>"


def _ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        directory = os.path.dirname(os.path.abspath(parsed.database))
        os.makedirs(directory, exist_ok=True)


async def init_db():
    """Initialize the database, creating all tables if they don't exist."""
    _ensure_sqlite_dir(DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Dispose pooled connections."""
    await engine.dispose()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get an async database session."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
