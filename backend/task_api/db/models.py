from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Column, DateTime, Index, SmallInteger, Text, func, text
from sqlalchemy.dialects import mysql
from sqlmodel import SQLModel, Field

# DATETIME(6) on MySQL so consecutive updates stay distinguishable
Timestamp = DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_storage_flag(value: Any) -> int:
    """Encode a boolean the way the ``completed`` column stores it."""
    return 1 if value else 0


def from_storage_flag(value: Any) -> bool:
    """Decode a stored ``completed`` value back into a bool."""
    return bool(value)


class TaskRow(SQLModel, table=True):
    __tablename__ = "TASK"
    __table_args__ = (
        Index("idx_task_completed", "completed"),
        Index("idx_task_created_at", "created_at"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    completed: int = Field(
        default=0,
        sa_column=Column(SmallInteger, nullable=False, server_default=text("0")),
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(Timestamp, nullable=False, server_default=func.now()),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(Timestamp, nullable=False, server_default=func.now()),
    )
