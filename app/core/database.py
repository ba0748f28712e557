"""Database handle: engine and session factory built once at startup and passed explicitly."""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models.base import Base

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record) -> None:
    """Turn on FK enforcement so ON DELETE CASCADE applies to refresh tokens.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one process.

    Usage:
        db = Database(settings.DATABASE_URL)
        session = db.SessionLocal()
        ...
        db.dispose()
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        connect_args: dict = {}
        engine_kwargs: dict = {"pool_pre_ping": True, "echo": echo}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
            if url in IN_MEMORY_SQLITE_URLS:
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        self.url = url
        self.engine: Engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
        if url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        """Create all tables (tests and local runs; production uses Alembic)."""
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    database: Database = request.app.state.db
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
