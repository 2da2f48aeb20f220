# app/client/views.py
"""Presentation state for the task client.

Each view keeps only in-memory state; reloading re-fetches from the server.
"""

import logging
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

import requests

from app.client.api import ApiError, TaskApiClient
from app.constants import (
    TaskStatus,
    TaskPriority,
    STATUS_VALUES,
    PRIORITY_VALUES,
    TITLE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
)

logger = logging.getLogger(__name__)

FILTERS = ("all", "active", "completed")


def format_due_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return value


class ApiStatusIndicator:
    """Tracks whether the API answers its liveness probe"""

    def __init__(self, api: TaskApiClient):
        self.api = api
        self.status = "checking..."

    def check(self) -> str:
        try:
            response = self.api.health()
        except requests.RequestException as exc:
            logger.warning("API health check failed: %s", exc)
            self.status = "disconnected"
        else:
            self.status = "connected" if response.ok else "error"
        return self.status


class TaskListView:
    LOAD_ERROR = "Failed to load tasks. Please check if the API server is running."

    def __init__(self, api: TaskApiClient):
        self.api = api
        self.tasks: List[dict] = []
        self.loading = False
        self.error: Optional[str] = None
        self.filter = "all"
        self.can_retry = False
        self._last_query: Dict[str, Optional[str]] = {}

    def load(self, status: Optional[str] = None, priority: Optional[str] = None) -> bool:
        """Fetch the task list, replacing local state. Returns True on success."""
        self.loading = True
        self.error = None
        self.can_retry = False
        self._last_query = {"status": status, "priority": priority}
        try:
            data = self.api.list_tasks(status=status, priority=priority)
            self.tasks = data.get("tasks") or []
            return True
        except (ApiError, requests.RequestException) as exc:
            logger.error("Error fetching tasks: %s", exc)
            self.error = self.LOAD_ERROR
            self.can_retry = True
            return False
        finally:
            self.loading = False

    def retry(self) -> bool:
        """Repeat the last list fetch after a failure"""
        if not self.can_retry:
            return False
        return self.load(**self._last_query)

    def set_filter(self, name: str) -> None:
        if name not in FILTERS:
            raise ValueError(f"Unknown filter {name!r}; expected one of {', '.join(FILTERS)}")
        self.filter = name

    @property
    def visible_tasks(self) -> List[dict]:
        if self.filter == "completed":
            return [task for task in self.tasks if task.get("completed")]
        if self.filter == "active":
            return [task for task in self.tasks if not task.get("completed")]
        return list(self.tasks)

    def toggle_complete(self, task_id: int) -> bool:
        try:
            updated = self.api.toggle_complete(task_id)
        except (ApiError, requests.RequestException) as exc:
            logger.error("Error toggling task %s: %s", task_id, exc)
            self.error = "Failed to update task"
            return False
        self.tasks = [updated if task["id"] == task_id else task for task in self.tasks]
        return True

    def delete_task(self, task_id: int, confirm: Optional[Callable[[], bool]] = None) -> bool:
        if confirm is not None and not confirm():
            return False
        try:
            self.api.delete_task(task_id)
        except (ApiError, requests.RequestException) as exc:
            logger.error("Error deleting task %s: %s", task_id, exc)
            self.error = "Failed to delete task"
            return False
        self.tasks = [task for task in self.tasks if task["id"] != task_id]
        return True

    @staticmethod
    def render_card(task: dict) -> str:
        mark = "[x]" if task.get("completed") else "[ ]"
        lines = [f"{mark} {task['title']}"]
        if task.get("description"):
            lines.append(f"    {task['description']}")

        badges = [f"[{task.get('status')}]", f"[{task.get('priority')}]"]
        due = format_due_date(task.get("dueDate"))
        if due:
            badges.append(f"[Due: {due}]")
        if task.get("isOverdue"):
            badges.append("[overdue]")
        if task.get("tags"):
            badges.append("#" + " #".join(task["tags"]))
        lines.append("    " + " ".join(badges))
        return "\n".join(lines)

    def render(self) -> str:
        if self.loading:
            return "Loading tasks..."
        if self.error and self.can_retry:
            return f"{self.error}\n(retry available)"

        visible = self.visible_tasks
        out = [f"Tasks ({len(visible)})"]
        if self.error:
            out.append(f"! {self.error}")
        if not visible:
            out.append("No tasks found. Create your first task to get started!")
        else:
            out.extend(self.render_card(task) for task in visible)
        return "\n".join(out)


class TaskFormView:
    """New-task form with the server's field constraints checked locally"""

    FIELDS = ("title", "description", "status", "priority", "due_date", "tags")

    def __init__(self, api: TaskApiClient):
        self.api = api
        self.error: Optional[str] = None
        self.field_errors: Dict[str, str] = {}
        self.success = False
        self.loading = False
        self.reset()

    def reset(self) -> None:
        self.data = {
            "title": "",
            "description": "",
            "status": TaskStatus.TODO.value,
            "priority": TaskPriority.MEDIUM.value,
            "due_date": "",
            "tags": "",
        }

    def set_field(self, name: str, value: str) -> None:
        if name not in self.FIELDS:
            raise KeyError(name)
        self.data[name] = value

    def validate(self) -> Dict[str, str]:
        errors = {}
        title = (self.data["title"] or "").strip()
        if not title:
            errors["title"] = "Title is required"
        elif len(title) > TITLE_MAX_LENGTH:
            errors["title"] = f"Title cannot be more than {TITLE_MAX_LENGTH} characters"

        description = (self.data["description"] or "").strip()
        if len(description) > DESCRIPTION_MAX_LENGTH:
            errors["description"] = f"Description cannot be more than {DESCRIPTION_MAX_LENGTH} characters"

        if self.data["status"] not in STATUS_VALUES:
            errors["status"] = f"Status must be one of: {', '.join(STATUS_VALUES)}"
        if self.data["priority"] not in PRIORITY_VALUES:
            errors["priority"] = f"Priority must be one of: {', '.join(PRIORITY_VALUES)}"

        if self.data["due_date"]:
            try:
                date.fromisoformat(self.data["due_date"])
            except ValueError:
                errors["due_date"] = "Invalid date format"

        self.field_errors = errors
        return errors

    def to_payload(self) -> dict:
        payload = {
            "title": self.data["title"].strip(),
            "description": (self.data["description"] or "").strip(),
            "status": self.data["status"],
            "priority": self.data["priority"],
            "tags": [tag.strip() for tag in (self.data["tags"] or "").split(",") if tag.strip()],
        }
        if self.data["due_date"]:
            payload["dueDate"] = self.data["due_date"]
        return payload

    def submit(self) -> Optional[dict]:
        """Create the task. Returns it on success and resets the form."""
        self.error = None
        self.success = False
        if self.validate():
            self.error = next(iter(self.field_errors.values()))
            return None

        self.loading = True
        try:
            task = self.api.create_task(self.to_payload())
        except ApiError as exc:
            logger.error("Error creating task: %s", exc)
            self.error = exc.errors[0]["message"] if exc.errors else exc.message
            return None
        except requests.RequestException as exc:
            logger.error("Error creating task: %s", exc)
            self.error = "Failed to create task"
            return None
        finally:
            self.loading = False

        self.success = True
        self.reset()
        return task
