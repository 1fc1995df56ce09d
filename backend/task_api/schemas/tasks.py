from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator

TITLE_MAX_LENGTH = 255

def _clean_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Title cannot be empty")
    return value

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    completed: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: Optional[str]) -> Optional[str]:
        return _clean_title(value)

class TaskUpdate(BaseModel):
    """Partial update: only fields that were explicitly set are written."""

    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: Optional[str]) -> Optional[str]:
        return _clean_title(value)

    # leaving a field out skips it; sending null for these is an error
    @field_validator("title", "completed")
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    completed: bool
    created_at: datetime
    updated_at: datetime

class PageMeta(BaseModel):
    total: int
    count: int
    limit: Optional[int] = None
    offset: int = 0

class TaskPage(BaseModel):
    data: List[TaskOut]
    meta: PageMeta

class TaskStats(BaseModel):
    total: int
    completed: int
    pending: int
    completion_rate: float
