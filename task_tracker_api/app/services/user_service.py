"""
Business logic for users.

Task ownership is keyed on ``users.id``.  The service only offers what
the identity layer needs: resolving a token subject (the e‑mail) to a
user and provisioning a user from the command line.
"""

import logging
import sqlite3
from typing import Optional

from task_tracker_api.app.core.db import get_connection
from task_tracker_api.app.schemas.user import UserRead

logger = logging.getLogger(__name__)


class UserService:
    """Service for looking up and provisioning task owners."""

    @classmethod
    async def get_user_by_email(cls, email: str) -> Optional[UserRead]:
        """Return the user with this e‑mail, or ``None``."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, email, full_name, disabled FROM users WHERE email = ?",
                (email,),
            ).fetchone()
            return cls._row_to_user_read(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def get_or_create_user(cls, email: str, full_name: Optional[str] = None) -> UserRead:
        """Return the user with this e‑mail, creating it when missing.

        ``full_name`` is only used for a newly created user.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT OR IGNORE INTO users (email, full_name) VALUES (?, ?)",
                (email, full_name),
            )
            if cursor.rowcount:
                logger.info("Registered user %s", email)
            conn.commit()
            row = cursor.execute(
                "SELECT id, email, full_name, disabled FROM users WHERE email = ?",
                (email,),
            ).fetchone()
            return cls._row_to_user_read(row)
        finally:
            conn.close()

    @classmethod
    async def set_disabled(cls, user_id: int, disabled: bool) -> None:
        """Enable or disable a user account.

        Disabled users keep their tasks but can no longer authenticate.

        Raises
        ------
        ValueError
            If the user does not exist.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE users SET disabled = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (1 if disabled else 0, user_id),
            )
            if not cursor.rowcount:
                raise ValueError(f"User {user_id} not found")
            conn.commit()
            logger.info("User %s %s", user_id, "disabled" if disabled else "enabled")
        finally:
            conn.close()

    @staticmethod
    def _row_to_user_read(row: sqlite3.Row) -> UserRead:
        return UserRead(
            id=row["id"],
            email=row["email"],
            full_name=row["full_name"],
            disabled=bool(row["disabled"]),
        )
