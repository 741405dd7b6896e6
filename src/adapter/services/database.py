"""Async engine construction

SQLite has no row locks and ignores SELECT ... FOR UPDATE. On SQLite every
transaction is therefore opened with BEGIN IMMEDIATE, which takes the
database write lock before the first read, so a use case that locks an
invoice and then re-reads its ledger is serialized against other writers.
"""

import logging
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

logger = logging.getLogger(__name__)


def create_database_engine(db_uri: str, **kwargs) -> AsyncEngine:
    engine = create_async_engine(db_uri, echo=False, future=True, **kwargs)
    if engine.dialect.name == "sqlite":
        enable_sqlite_write_locking(engine)
    return engine


def enable_sqlite_write_locking(engine: AsyncEngine) -> None:
    sync_engine = engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        # The driver would otherwise emit a deferred BEGIN before the first DML
        dbapi_connection.isolation_level = None

    @event.listens_for(sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    logger.debug("SQLite transactions will begin IMMEDIATE")
