"""
SQLAlchemy engine and session management.

Any SQLAlchemy URL is accepted. SQLite (the development default) gets its
parent directory created and cross-thread access enabled; repositories run
their sessions on worker threads.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import TypeVar
from uuid import uuid4

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

T = TypeVar("T")


def utcnow() -> datetime:
    """Current time as naive UTC, the form stored in the database."""
    return datetime.now(UTC).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid4())


def _ensure_sqlite_parent_dir(db_url: str) -> None:
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return
    database = url.database
    if not database or database == ":memory:" or database.startswith("file:"):
        return
    Path(database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


def create_db_engine(db_url: str) -> Engine:
    """
    Create an engine for a database URL.

    Args:
        db_url: SQLAlchemy URL (e.g. sqlite:///./.data/bytescart.db)

    Returns:
        Configured engine
    """
    _ensure_sqlite_parent_dir(db_url)
    options: dict = {"pool_pre_ping": True}
    if db_url.startswith("sqlite:"):
        options["connect_args"] = {"check_same_thread": False}
        if make_url(db_url).database in (None, "", ":memory:"):
            # One shared connection, or every worker thread sees its own empty database
            options["poolclass"] = StaticPool
    engine = create_engine(db_url, **options)
    logger.info(f"Created database engine for {engine.url.render_as_string(hide_password=True)}")
    return engine


class SessionProvider:
    """Light wrapper to create SQLAlchemy sessions from one engine."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._factory = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )

    def session(self) -> Session:
        return self._factory()

    async def run(self, work: Callable[[Session], T]) -> T:
        """
        Run ``work(session)`` on a worker thread with a fresh session.

        Awaiting the result can be cancelled (e.g. by ``asyncio.wait_for``);
        the thread finishes on its own and its result is discarded.
        """

        def call() -> T:
            with self.session() as session:
                return work(session)

        return await asyncio.to_thread(call)


def init_schema(engine: Engine) -> None:
    """Create missing tables."""
    from bytescart.infrastructure.implementations.sql.models import Base

    Base.metadata.create_all(engine)
    logger.info("Database schema initialized")
