"""
Pydantic models for the users that own tasks.

Users are provisioned out of band (see ``create_token.py``); the API
itself only looks them up to resolve the caller of a request.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserRead(BaseModel):
    """Schema for a user as known to the identity layer."""

    id: int
    email: str = Field(..., examples=["user@example.com"])
    full_name: Optional[str] = None
    disabled: bool = False

    model_config = {
        "from_attributes": True,
    }
