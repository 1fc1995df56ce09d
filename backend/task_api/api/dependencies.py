"""API dependencies for database access."""

from typing import Iterator

from fastapi import Depends
from sqlmodel import Session

from ..db.session import Database, database


def get_database() -> Database:
    """Dependency for the process-wide database resource."""
    return database


def get_session(db: Database = Depends(get_database)) -> Iterator[Session]:
    """Dependency yielding one pooled session per request."""
    with db.session() as session:
        yield session
