from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .config import settings


def make_engine(url: str, busy_timeout: float | None = None) -> Engine:
    """
    Create an engine for the given URL.

    SQLite gets two tweaks:
    - foreign keys switched on for every connection;
    - pysqlite's implicit transaction handling is disabled and every
      transaction opens with BEGIN IMMEDIATE, so the write lock is taken
      before the first read. Booking check-then-insert cannot interleave.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    engine = create_engine(
        url,
        connect_args={
            # FastAPI runs sync endpoints in a threadpool
            "check_same_thread": False,
            "timeout": busy_timeout if busy_timeout is not None else settings.sqlite_busy_timeout,
        },
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = make_engine(settings.resolved_database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db(bind: Engine | None = None) -> None:
    """Create missing tables."""
    from .models.tables import Base

    Base.metadata.create_all(bind=bind or engine)


# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
