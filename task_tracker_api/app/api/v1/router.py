"""
Top‑level router for version 1 of the API.

Aggregates the resource routers under a single ``APIRouter`` which the
application mounts at ``/api/v1``.
"""

from fastapi import APIRouter

from .endpoints import tasks

router = APIRouter()

# The tasks router declares its own "/tasks" paths, so no prefix here.
router.include_router(tasks.router, tags=["tasks"])
