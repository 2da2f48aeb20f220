# app/schemas/task.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_serializer, field_validator

from app.constants import (
    TaskStatus,
    TaskPriority,
    TITLE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
)
from app.schemas.common import CamelModel, Pagination, as_utc
from app.schemas.user import UserSummary


def _clean_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Title is required")
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title cannot be more than {TITLE_MAX_LENGTH} characters")
    return value


def _clean_description(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Description cannot be more than {DESCRIPTION_MAX_LENGTH} characters")
    return value


def _clean_tags(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return value
    return [tag.strip() for tag in value if tag and tag.strip()]


class TaskCreate(CamelModel):
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    user_id: Optional[int] = Field(default=None, alias="user")

    @field_validator("title")
    @classmethod
    def title_must_not_be_blank(cls, v):
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def description_length(cls, v):
        return _clean_description(v)

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, v):
        return _clean_tags(v)


class TaskUpdate(CamelModel):
    """Fields left out of the body are not touched.

    An explicit null only clears the nullable fields (description, dueDate).
    """

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def title_must_not_be_blank(cls, v):
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def description_length(cls, v):
        return _clean_description(v)

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, v):
        return _clean_tags(v)


class TaskOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    tags: List[str] = []
    completed: bool
    is_overdue: bool
    user: Optional[UserSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_serializer("due_date", "created_at", "updated_at")
    def serialize_utc(self, value):
        return as_utc(value)


class TaskListOut(CamelModel):
    tasks: List[TaskOut]
    pagination: Pagination


class TaskDeletedOut(CamelModel):
    message: str
    task: TaskOut
