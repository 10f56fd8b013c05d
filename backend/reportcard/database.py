"""
Engine and session setup for the report-card store.

PostgreSQL is the deployed backend (schema managed by Alembic). SQLite is
used for local runs, where tables are created on startup, and an in-memory
SQLite database backs the test suite.
"""

import os
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./report_cards.db")

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def engine_options(url: str) -> dict:
    """Keyword arguments for create_engine, chosen by backend."""
    options = {"echo": False}
    if url.startswith("postgresql"):
        options.update(pool_size=10, max_overflow=20, pool_pre_ping=True)
    elif is_sqlite(url):
        # Request handlers run in a threadpool
        options["connect_args"] = {"check_same_thread": False}
        if url in IN_MEMORY_URLS:
            # One shared connection, or each session gets an empty database
            options["poolclass"] = StaticPool
    return options


engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))

if is_sqlite(DATABASE_URL) and DATABASE_URL not in IN_MEMORY_URLS:
    @event.listens_for(engine, "connect")
    def use_wal_journal(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    """Request-scoped session; closed when the response is done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create the students table on SQLite. PostgreSQL goes through Alembic."""
    Base.metadata.create_all(bind=engine)


def drop_tables():
    Base.metadata.drop_all(bind=engine)
