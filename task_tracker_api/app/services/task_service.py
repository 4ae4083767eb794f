"""
Service for managing personal tasks.

Every task belongs to the user who created it.  All reads, updates and
deletes are expressed as a single SQL statement keyed on both the task
ID and the caller's user ID, so a task owned by someone else behaves
exactly like a task that does not exist: the service raises
``TaskNotFoundError`` in both cases.

Writes replace all four business fields (title, description, due date
and status) at once; ``id``, ``user_id`` and ``created_at`` never
change after creation.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, timezone
from typing import Any, List, Mapping

from pydantic import ValidationError

from task_tracker_api.app.core.db import get_connection
from task_tracker_api.app.core.exceptions import (
    TaskNotFoundError,
    TaskValidationError,
    errors_by_field,
)
from task_tracker_api.app.schemas.task import TaskRead, TaskWrite

logger = logging.getLogger(__name__)

_TASK_COLUMNS = "id, user_id, title, description, due_date, status, created_at, updated_at"

# SQLite INTEGER is a signed 64-bit value; larger IDs cannot name a row.
_MIN_ID = -(2 ** 63)
_MAX_ID = 2 ** 63 - 1


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class TaskService:
    """Service for listing, creating, reading, updating and deleting tasks."""

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    @staticmethod
    def validate_payload(payload: Any) -> TaskWrite:
        """Validate a raw request body against ``TaskWrite``.

        Raises
        ------
        TaskValidationError
            Listing every failing field, not only the first one.
        """
        if isinstance(payload, TaskWrite):
            return payload
        try:
            return TaskWrite.model_validate(payload)
        except ValidationError as exc:
            raise TaskValidationError(errors_by_field(exc.errors())) from exc

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @classmethod
    async def list_tasks(cls, user_id: int) -> List[TaskRead]:
        """Return all tasks owned by ``user_id`` ordered by ID.

        An empty list is returned for a user without tasks.  The result
        is not paginated.
        """
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_TASK_COLUMNS} FROM tasks WHERE user_id = ? ORDER BY id ASC",
                (user_id,),
            ).fetchall()
            return [cls._row_to_task_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_task(cls, user_id: int, task_id: int) -> TaskRead:
        """Return a single task owned by ``user_id``.

        Raises
        ------
        TaskNotFoundError
            If the task does not exist or belongs to another user.
        """
        conn = get_connection()
        try:
            row = cls._fetch_owned(conn.cursor(), user_id, task_id)
            if row is None:
                logger.debug("Task %s not found for user %s", task_id, user_id)
                raise TaskNotFoundError(task_id)
            return cls._row_to_task_read(row)
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    @classmethod
    async def create_task(cls, user_id: int, data: TaskWrite | Mapping[str, Any]) -> TaskRead:
        """Create a task owned by ``user_id`` and return it.

        ``data`` may be a validated ``TaskWrite`` or a raw mapping; any
        ``user_id`` it carries is ignored in favour of the caller's.

        Raises
        ------
        TaskValidationError
            If ``data`` is a mapping that fails validation.  Nothing is
            written in that case.
        """
        task = cls.validate_payload(data)
        now = _utcnow()
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO tasks (user_id, title, description, due_date, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    task.title,
                    task.description,
                    task.due_date.isoformat(),
                    task.status.value,
                    now,
                    now,
                ),
            )
            task_id = cursor.lastrowid
            conn.commit()
            logger.info("User %s created task %s", user_id, task_id)
            row = cls._fetch_owned(cursor, user_id, task_id)
            return cls._row_to_task_read(row)
        finally:
            conn.close()

    @classmethod
    async def update_task(cls, user_id: int, task_id: int, payload: Any) -> TaskRead:
        """Replace the business fields of a task owned by ``user_id``.

        The ownership lookup happens before validation, so an unknown
        task yields ``TaskNotFoundError`` even for an invalid body.
        Only the four validated fields are written; other keys in
        ``payload`` (``user_id``, ``id``, ``created_at``...) are ignored.

        Raises
        ------
        TaskNotFoundError
            If the task does not exist or belongs to another user.
        TaskValidationError
            If the payload is invalid.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if cls._fetch_owned(cursor, user_id, task_id) is None:
                logger.debug("Task %s not found for user %s", task_id, user_id)
                raise TaskNotFoundError(task_id)
            task = cls.validate_payload(payload)
            cursor.execute(
                """
                UPDATE tasks
                SET title = ?, description = ?, due_date = ?, status = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                """,
                (
                    task.title,
                    task.description,
                    task.due_date.isoformat(),
                    task.status.value,
                    _utcnow(),
                    task_id,
                    user_id,
                ),
            )
            if not cursor.rowcount:
                # Deleted between the lookup and the update.
                raise TaskNotFoundError(task_id)
            conn.commit()
            logger.info("User %s updated task %s", user_id, task_id)
            row = cls._fetch_owned(cursor, user_id, task_id)
            return cls._row_to_task_read(row)
        finally:
            conn.close()

    @classmethod
    async def delete_task(cls, user_id: int, task_id: int) -> None:
        """Permanently delete a task owned by ``user_id``.

        Raises
        ------
        TaskNotFoundError
            If nothing was deleted, including a repeated delete of the
            same task.
        """
        if not _MIN_ID <= task_id <= _MAX_ID:
            raise TaskNotFoundError(task_id)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM tasks WHERE id = ? AND user_id = ?",
                (task_id, user_id),
            )
            affected = cursor.rowcount
            conn.commit()
            if not affected:
                logger.debug("Task %s not found for user %s", task_id, user_id)
                raise TaskNotFoundError(task_id)
            logger.info("User %s deleted task %s", user_id, task_id)
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _fetch_owned(cursor: sqlite3.Cursor, user_id: int, task_id: int) -> sqlite3.Row | None:
        if not _MIN_ID <= task_id <= _MAX_ID:
            return None
        return cursor.execute(
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, user_id),
        ).fetchone()

    @staticmethod
    def _row_to_task_read(row: sqlite3.Row) -> TaskRead:
        """Convert a database row to a TaskRead schema instance."""
        return TaskRead(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            description=row["description"],
            due_date=date.fromisoformat(row["due_date"]),
            status=row["status"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
