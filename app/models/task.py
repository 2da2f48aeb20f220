# app/models/task.py
import enum

from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, JSON, Index, event
from sqlalchemy.orm import relationship, validates

from app.constants import (
    TaskStatus,
    TaskPriority,
    STATUS_VALUES,
    PRIORITY_VALUES,
    TITLE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
)
from app.database import Base
from app.utils.dates import utcnow, to_naive_utc
from app.utils.errors import ModelValidationError


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_status", "user_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=True)

    status = Column(String(20), default=TaskStatus.TODO.value, nullable=False)
    priority = Column(String(20), default=TaskPriority.MEDIUM.value, nullable=False)
    due_date = Column(DateTime, nullable=True)
    tags = Column(JSON, default=list, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)

    # Weak reference: no foreign key constraint, a removed user leaves it dangling
    user_id = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship(
        "User",
        primaryjoin="foreign(Task.user_id) == User.id",
        viewonly=True,
        lazy="joined",
    )

    @validates("title", "description")
    def _strip_text(self, key, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @validates("status", "priority")
    def _enum_value(self, key, value):
        if isinstance(value, enum.Enum):
            return value.value
        return value

    @validates("tags")
    def _clean_tags(self, key, value):
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            return value
        cleaned = []
        for tag in value:
            if isinstance(tag, str):
                tag = tag.strip()
                if not tag:
                    continue
            cleaned.append(tag)
        return cleaned

    @validates("due_date")
    def _normalize_due_date(self, key, value):
        return to_naive_utc(value)

    @property
    def is_overdue(self) -> bool:
        """A task is overdue when its due date has passed and it is not completed"""
        if not self.due_date or self.completed:
            return False
        return utcnow() > self.due_date

    def set_completed(self, completed: bool) -> None:
        """Set the completed flag and keep status in step with it"""
        self.completed = bool(completed)
        self.status = TaskStatus.COMPLETED.value if self.completed else TaskStatus.TODO.value

    def toggle_complete(self) -> None:
        self.set_completed(not self.completed)

    def apply_defaults(self) -> None:
        if self.status is None:
            self.status = TaskStatus.TODO.value
        if self.priority is None:
            self.priority = TaskPriority.MEDIUM.value
        if self.tags is None:
            self.tags = []
        if self.completed is None:
            self.completed = False
        # A completed status always means a completed task
        if self.status == TaskStatus.COMPLETED.value:
            self.completed = True

    def validate(self) -> None:
        """Check field constraints, raising ModelValidationError with every failure"""
        errors = []

        if not self.title:
            errors.append({"field": "title", "message": "Task title is required"})
        elif len(self.title) > TITLE_MAX_LENGTH:
            errors.append({
                "field": "title",
                "message": f"Title cannot be more than {TITLE_MAX_LENGTH} characters",
            })

        if self.description and len(self.description) > DESCRIPTION_MAX_LENGTH:
            errors.append({
                "field": "description",
                "message": f"Description cannot be more than {DESCRIPTION_MAX_LENGTH} characters",
            })

        if self.status not in STATUS_VALUES:
            errors.append({
                "field": "status",
                "message": f"Status must be one of: {', '.join(STATUS_VALUES)}",
            })

        if self.priority not in PRIORITY_VALUES:
            errors.append({
                "field": "priority",
                "message": f"Priority must be one of: {', '.join(PRIORITY_VALUES)}",
            })

        if not isinstance(self.tags, list) or not all(isinstance(t, str) for t in self.tags):
            errors.append({"field": "tags", "message": "Tags must be a list of strings"})

        if errors:
            raise ModelValidationError(errors)


Index("ix_tasks_created_at_desc", Task.created_at.desc())


@event.listens_for(Task, "before_insert")
@event.listens_for(Task, "before_update")
def _task_before_save(mapper, connection, target):
    target.apply_defaults()
    target.validate()
