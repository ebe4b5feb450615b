from contextlib import contextmanager
from typing import Iterator
from sqlalchemy import Column, DateTime, create_engine, event, func
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from app.core.config import settings
from app.core.logging_config import logger

DATABASE_URL = settings.database_url


def _configure_sqlite(engine: Engine) -> None:
    """
    Make SQLite behave like the production store for transactions.

    pysqlite's own transaction handling is disabled so that SAVEPOINT works,
    and every transaction starts with BEGIN IMMEDIATE so that concurrent
    read-increment-write sequences serialize instead of failing on upgrade.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        new_engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 30},
            future=True,
        )
        _configure_sqlite(new_engine)
        return new_engine

    return create_engine(
        url,
        pool_pre_ping=True,      # Test connections before using
        pool_size=10,            # Base connection pool size
        max_overflow=20,         # Max connections beyond pool_size
        pool_timeout=30,         # Timeout for getting connection (seconds)
        pool_recycle=3600,       # Recycle connections after 1 hour
        echo=False,              # Set to True for debugging SQL logs
        future=True,
    )


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
)

logger.info(f"Database engine configured: dialect={engine.dialect.name}")


class Base(DeclarativeBase):
    pass

class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Scope a unit of work on the session.

    Commits when the block exits normally. Any exception (including
    cancellation) rolls the whole unit back before it propagates, so no
    partial writes survive.
    """
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise
