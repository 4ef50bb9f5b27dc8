from __future__ import annotations

import logging
import zlib
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, text  # type: ignore
from sqlalchemy.engine import Engine  # type: ignore
from sqlalchemy.orm import Session, sessionmaker, declarative_base  # type: ignore

from config import get_config


logger = logging.getLogger(__name__)

Base = declarative_base()

engine: Optional[Engine] = None
SessionLocal: Optional[sessionmaker] = None


def _install_sqlite_hooks(eng: Engine) -> None:
    """Foreign keys on, and every transaction opened with BEGIN IMMEDIATE.

    pysqlite's own deferred BEGIN lets two writers read the same snapshot
    and race; IMMEDIATE takes the write lock up front so read-then-write
    units of work serialise.
    """

    @event.listens_for(eng, "connect")
    def _on_connect(dbapi_connection, connection_record):  # type: ignore
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(eng, "begin")
    def _on_begin(conn):  # type: ignore
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def _make_engine(url: str) -> Engine:
    db_cfg = get_config().database
    if url.startswith("sqlite"):
        eng = create_engine(
            url,
            echo=db_cfg.echo,
            future=True,
            connect_args={"check_same_thread": False, "timeout": db_cfg.pool_timeout},
        )
        _install_sqlite_hooks(eng)
        return eng
    # Tune pool to avoid connection starvation and long waits
    return create_engine(
        url,
        pool_pre_ping=True,
        echo=db_cfg.echo,
        future=True,
        pool_size=db_cfg.pool_size,
        max_overflow=db_cfg.max_overflow,
        pool_timeout=db_cfg.pool_timeout,
        pool_recycle=db_cfg.pool_recycle,
    )


def configure_engine(url: Optional[str] = None) -> Engine:
    """(Re)bind the module-level engine and session factory.

    Called lazily on first use with the configured URL; tests call it with a
    per-test database.
    """
    global engine, SessionLocal
    if engine is not None:
        engine.dispose()
    target = url or get_config().database.effective_url
    engine = _make_engine(target)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False, future=True)
    logger.debug("database engine bound to %s", engine.url.render_as_string(hide_password=True))
    return engine


def get_engine() -> Engine:
    if engine is None:
        configure_engine()
    return engine  # type: ignore[return-value]


def init_db() -> None:
    """Create all tables that do not exist yet."""
    # Register every mapped class on Base.metadata
    import core.models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def get_db_session() -> Session:
    if SessionLocal is None:
        configure_engine()
    return SessionLocal()  # type: ignore[misc]


@contextmanager
def session_scope() -> Iterator[Session]:
    """One atomic unit of work: commit on success, roll back on any error."""
    session = get_db_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def acquire_advisory_lock(session: Session, key: str) -> None:
    """Serialise concurrent units of work on `key` until commit/rollback.

    PostgreSQL only; SQLite transactions are already serialised by
    BEGIN IMMEDIATE.
    """
    if session.get_bind().dialect.name != "postgresql":
        return
    lock_id = zlib.crc32(key.encode("utf-8"))
    session.execute(text("SELECT pg_advisory_xact_lock(:lock_id)"), {"lock_id": lock_id})
