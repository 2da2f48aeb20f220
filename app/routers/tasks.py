# app/routers/tasks.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import AppConfig
from app.database import get_db
from app.constants import TaskStatus, TaskPriority
from app.models.task import Task
from app.schemas import TaskCreate, TaskUpdate, TaskOut, TaskListOut, TaskDeletedOut, Pagination
from app.utils.errors import ModelValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])

# Fields that an explicit null in an update clears instead of ignoring
NULLABLE_FIELDS = {"description", "due_date"}


def get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


def save_task(db: Session, task: Task, failure_detail: str) -> Task:
    """Commit the pending changes for a task, translating store failures"""
    task_id = task.id
    try:
        db.add(task)
        db.commit()
    except ModelValidationError:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("%s (task id=%s)", failure_detail, task_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_detail
        )
    db.refresh(task)
    return task


def apply_task_update(task: Task, update: TaskUpdate) -> None:
    """Copy the fields present in an update onto a task.

    When only `completed` is sent, status follows it. When status is sent it
    wins and `completed` is derived from it.
    """
    data = update.model_dump(exclude_unset=True)
    completed = data.pop("completed", None)

    for field, value in data.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(task, field, value)

    if data.get("status") is not None:
        task.completed = task.status == TaskStatus.COMPLETED.value
    elif completed is not None:
        task.set_completed(completed)


@router.get("", response_model=TaskListOut)
def list_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(AppConfig.DEFAULT_PAGE_SIZE, ge=1, le=AppConfig.MAX_PAGE_SIZE),
    db: Session = Depends(get_db)
):
    """List tasks newest first, optionally filtered by status and priority"""
    try:
        query = db.query(Task)
        if status_filter:
            query = query.filter(Task.status == status_filter.value)
        if priority:
            query = query.filter(Task.priority == priority.value)

        total = query.count()
        tasks = (
            query.order_by(Task.created_at.desc(), Task.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching tasks")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tasks"
        )

    return {
        "tasks": tasks,
        "pagination": Pagination.build(page=page, limit=limit, total=total),
    }


@router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: int, db: Session = Depends(get_db)):
    """Get a specific task by ID"""
    return get_task_or_404(db, task_id)


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(task_in: TaskCreate, db: Session = Depends(get_db)):
    """Create a new task"""
    task = Task(**task_in.model_dump())
    task = save_task(db, task, "Failed to create task")
    logger.info("Task %s created: %s", task.id, task.title)
    return task


@router.put("/{task_id}", response_model=TaskOut)
def update_task(task_id: int, task_update: TaskUpdate, db: Session = Depends(get_db)):
    """Update a task with the fields present in the body"""
    task = get_task_or_404(db, task_id)
    apply_task_update(task, task_update)
    return save_task(db, task, "Failed to update task")


@router.delete("/{task_id}", response_model=TaskDeletedOut)
def delete_task(task_id: int, db: Session = Depends(get_db)):
    """Delete a task permanently"""
    task = get_task_or_404(db, task_id)
    deleted = TaskOut.model_validate(task)
    try:
        db.delete(task)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting task %s", task_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete task"
        )

    logger.info("Task %s deleted", task_id)
    return {"message": "Task deleted successfully", "task": deleted}


@router.patch("/{task_id}/complete", response_model=TaskOut)
def toggle_task_complete(task_id: int, db: Session = Depends(get_db)):
    """Flip a task's completion and move its status to completed or todo"""
    task = get_task_or_404(db, task_id)
    task.toggle_complete()
    return save_task(db, task, "Failed to update task")
