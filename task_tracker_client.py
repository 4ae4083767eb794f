"""Task Tracker API client.

A thin wrapper around the ``/api/v1/tasks`` endpoints built on the
``requests`` library.  Every method returns a tuple ``(data, error)``:
on success ``error`` is ``None``; on failure ``data`` is empty and
``error`` is a dictionary with the keys

* ``status_code`` - the HTTP status, or ``None`` for network failures,
* ``message`` - the server's message or the exception text,
* ``errors`` - for validation failures, the ``{field: [reasons]}``
  mapping returned by the server, otherwise an empty dict.

Example::

    api = TaskTrackerAPI(base_url="http://localhost:8000", api_key=token)
    task, error = api.create_task(
        title="Write report",
        description="Q3 summary",
        due_date="2024-08-01",
        status="NOT_STARTED",
    )
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Union

import requests


logger = logging.getLogger(__name__)

ApiError = Dict[str, Any]


class TaskTrackerAPI:
    """Client for the Task Tracker API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        prefix: str = "/api/v1",
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8000``.
            api_key: Bearer token sent in the ``Authorization`` header.
            session: Optional requests session.  If not supplied a
                session is created automatically.
            prefix: Path prefix of the API version.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/") + prefix
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[ApiError]]:
        """Perform an HTTP request and return ``(data, error)``."""
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            return None, self._error_from_response(exc)
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc), "errors": {}}

    @staticmethod
    def _error_from_response(exc: requests.HTTPError) -> ApiError:
        response = exc.response
        status = response.status_code if response is not None else None
        message = ""
        errors: Dict[str, List[str]] = {}
        if response is not None:
            try:
                body = response.json()
            except ValueError:
                message = response.text
            else:
                if isinstance(body, dict):
                    message = body.get("message") or body.get("detail") or ""
                    errors = body.get("errors") or {}
                else:
                    message = str(body)
        if not message:
            message = str(exc)
        logger.error("API request failed (%s): %s", status, message)
        return {"status_code": status, "message": message, "errors": errors}

    @staticmethod
    def _task_body(
        title: str, description: str, due_date: Union[str, date], status: str
    ) -> Dict[str, str]:
        if isinstance(due_date, date):
            due_date = due_date.isoformat()
        return {
            "title": title,
            "description": description,
            "due_date": due_date,
            "status": status,
        }

    # ------------------------------------------------------------------
    # Task operations
    # ------------------------------------------------------------------
    def list_tasks(self) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        """Retrieve all tasks of the authenticated user."""
        data, error = self._request("GET", "/tasks")
        if error:
            return [], error
        return data or [], None

    def get_task(self, task_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Retrieve a single task by ID."""
        return self._request("GET", f"/tasks/{task_id}")

    def create_task(
        self, *, title: str, description: str, due_date: Union[str, date], status: str
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Create a task and return it as stored by the server."""
        body = self._task_body(title, description, due_date, status)
        return self._request("POST", "/tasks", json_body=body)

    def update_task(
        self,
        task_id: int,
        *,
        title: str,
        description: str,
        due_date: Union[str, date],
        status: str,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Replace all fields of a task."""
        body = self._task_body(title, description, due_date, status)
        return self._request("PUT", f"/tasks/{task_id}", json_body=body)

    def delete_task(self, task_id: int) -> Tuple[bool, Optional[ApiError]]:
        """Delete a task.

        Returns:
            A tuple ``(success, error)``.
        """
        _, error = self._request("DELETE", f"/tasks/{task_id}")
        return error is None, error
