"""Database engine and session factory."""

from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Create an engine, preparing SQLite specifics.

    File-backed SQLite databases get their parent directory created, and
    in-memory ones share a single connection so every session sees the
    same data.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, future=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    else:
        path = database_url.split("///", 1)[-1]
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, future=True, **kwargs)

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def create_session_factory(database_url: str, create_tables: bool = True) -> sessionmaker:
    """Build the process-wide session factory handed to the store.

    Args:
        database_url: SQLAlchemy database URL
        create_tables: Create missing tables on the engine

    Returns:
        A configured sessionmaker
    """
    # Registers the mapped classes on Base.metadata
    from graded_reader.storage import models  # noqa: F401

    engine = create_db_engine(database_url)
    if create_tables:
        Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
