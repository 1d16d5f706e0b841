# industrin/db/session.py
import json
import os

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

# Postgres in production, SQLite file for local development
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./industrin.db")


def is_sqlite_url(url: str) -> bool:
    return str(url).startswith("sqlite")


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite needs PRAGMA foreign_keys per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON;")
    cursor.close()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(dbapi_connection, connection_record):
    """
    SQLite's built-in lower() folds ASCII only, so ILIKE (lower(x) LIKE lower(y))
    would treat "Örebro" and "örebro" as different. Replace it per connection.
    """
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def json_dumps(value) -> str:
    # keep å/ä/ö readable so substring search over JSON columns matches
    return json.dumps(value, ensure_ascii=False)


# Create engine
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if is_sqlite_url(DATABASE_URL) else {},
    pool_pre_ping=True,  # safer reconnects
    json_serializer=json_dumps,
    future=True,
)

if is_sqlite_url(DATABASE_URL):
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
    event.listen(engine, "connect", register_sqlite_functions)


# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    future=True,
)
