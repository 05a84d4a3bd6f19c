# app/core/database.py

import ssl
from typing import AsyncGenerator

from loguru import logger
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine
)
from sqlalchemy.pool import NullPool, StaticPool
from sqlalchemy import text

from app.core.config import settings

DATABASE_URL = settings.DATABASE_URL


# ----------------------------------------------------
# SSL for the hosted Postgres pooler
# ----------------------------------------------------
def make_ssl():
    ctx = ssl.create_default_context()
    if not settings.DB_SSL_VERIFY:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


# ----------------------------------------------------
# Engine
# ----------------------------------------------------
if DATABASE_URL.startswith("sqlite"):
    # Local / test database: one shared connection so in-memory data survives
    logger.info("Configuring database (SQLite)")
    engine = create_async_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    # AsyncPG behind the pooler: no prepared statements, no client-side pooling
    logger.info("Configuring database (Pooler mode)")
    engine = create_async_engine(
        DATABASE_URL,
        echo=False,
        connect_args={
            "ssl": make_ssl(),
            "statement_cache_size": 0,
            "prepared_statement_name_func": None,
        },
        pool_pre_ping=True,
        poolclass=NullPool,
    )


# ----------------------------------------------------
# Sessions
# ----------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


# ----------------------------------------------------
# Create tables
# ----------------------------------------------------
async def init_db():
    # Register every table on the metadata before create_all
    from app.models import (  # noqa: F401
        announcement, audit, course, event, friendship, messaging,
        permission, project, query, report_format, site_config, user,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def drop_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)


# ----------------------------------------------------
# Test Connection
# ----------------------------------------------------
async def test_connection():
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
        logger.debug("DB connection OK")
