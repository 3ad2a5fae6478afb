"""Async SQLAlchemy engine, session factory and declarative base."""

from __future__ import annotations

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from safeplace.config import settings


class Base(DeclarativeBase):
    pass


def _connect_args(url: str, timeout: float) -> dict:
    """Driver-specific connection/statement timeouts."""
    if url.startswith("sqlite"):
        return {"timeout": timeout}
    if "+asyncpg" in url:
        return {"timeout": timeout, "command_timeout": timeout}
    return {}


def build_engine(url: str | None = None, timeout: float | None = None) -> AsyncEngine:
    url = url or settings.database_url
    timeout = timeout if timeout is not None else settings.db_timeout_seconds
    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=not url.startswith("sqlite"),
        connect_args=_connect_args(url, timeout),
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, expire_on_commit=False)


engine = build_engine()
async_session_factory = build_session_factory(engine)


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request."""
    async with async_session_factory() as session:
        yield session
