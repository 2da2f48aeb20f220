# app/client/api.py
"""HTTP client for the task API, used by the client views."""

import logging
from typing import Any, Dict, List, Optional

import requests

from app.config.settings import AppConfig

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A non-2xx response from the API"""

    def __init__(self, status_code: int, message: str, errors: Optional[List[dict]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(f"{status_code}: {message}")


class TaskApiClient:
    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self.base_url = (base_url or AppConfig.API_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        if self.timeout is not None:
            kwargs.setdefault("timeout", self.timeout)
        response = self.session.request(method, self._url(path), **kwargs)
        if not response.ok:
            raise self._error_from(response)
        return response

    @staticmethod
    def _error_from(response: requests.Response) -> ApiError:
        message = response.reason or "Request failed"
        errors = []
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("detail") or body.get("error")
            if isinstance(detail, str):
                message = detail
            errors = body.get("errors") or []
        return ApiError(response.status_code, message, errors)

    def health(self) -> requests.Response:
        """Hit the liveness probe; the caller inspects the status code"""
        kwargs = {"timeout": self.timeout} if self.timeout is not None else {}
        return self.session.get(self._url("/health"), **kwargs)

    def list_tasks(self, status: Optional[str] = None, priority: Optional[str] = None,
                   page: Optional[int] = None, limit: Optional[int] = None) -> Dict[str, Any]:
        params = {
            key: value
            for key, value in (("status", status), ("priority", priority), ("page", page), ("limit", limit))
            if value is not None
        }
        return self._request("GET", "/api/tasks", params=params).json()

    def get_task(self, task_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/tasks/{task_id}").json()

    def create_task(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/tasks", json=data).json()

    def update_task(self, task_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/tasks/{task_id}", json=data).json()

    def toggle_complete(self, task_id: int) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/tasks/{task_id}/complete").json()

    def delete_task(self, task_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/tasks/{task_id}").json()
