"""
API endpoints for personal tasks.

Every route requires a bearer token; the resolved caller scopes all
operations, so users only ever see and modify their own tasks.  A task
belonging to another user answers 404 exactly like a missing one.
Domain errors raised by ``TaskService`` are turned into responses by
the handlers in ``core.exceptions``.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, Response, status

from task_tracker_api.app.core.security import get_current_user
from task_tracker_api.app.schemas.task import TaskRead, TaskWrite
from task_tracker_api.app.services.task_service import TaskService


router = APIRouter()

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"description": "Task not found"}}
_INVALID = {422: {"description": "Validation error"}}


@router.get("/tasks", response_model=List[TaskRead], summary="List my tasks")
async def list_tasks(current_user: dict = Depends(get_current_user)) -> List[TaskRead]:
    """Return every task owned by the caller (possibly none)."""
    return await TaskService.list_tasks(current_user["user_id"])


@router.post(
    "/tasks",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
    responses=_INVALID,
)
async def create_task(
    task_in: TaskWrite,
    current_user: dict = Depends(get_current_user),
) -> TaskRead:
    """Create a task owned by the caller.

    All four fields are required.  A ``user_id`` in the body is
    ignored; the owner is always the authenticated caller.
    """
    return await TaskService.create_task(current_user["user_id"], task_in)


@router.get(
    "/tasks/{task_id}",
    response_model=TaskRead,
    summary="Get a task by ID",
    responses=_NOT_FOUND,
)
async def get_task(
    task_id: int,
    current_user: dict = Depends(get_current_user),
) -> TaskRead:
    """Return one of the caller's tasks."""
    return await TaskService.get_task(current_user["user_id"], task_id)


@router.put(
    "/tasks/{task_id}",
    response_model=TaskRead,
    summary="Replace a task",
    responses={**_NOT_FOUND, **_INVALID},
)
async def update_task(
    task_id: int,
    payload: Any = Body(None),
    current_user: dict = Depends(get_current_user),
) -> TaskRead:
    """Replace all fields of one of the caller's tasks.

    The body is validated by the service after the ownership lookup,
    so an unknown task answers 404 even when the body is missing, is
    not a JSON object or is otherwise invalid.
    """
    return await TaskService.update_task(current_user["user_id"], task_id, payload)


@router.delete(
    "/tasks/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
    responses=_NOT_FOUND,
)
async def delete_task(
    task_id: int,
    current_user: dict = Depends(get_current_user),
) -> Response:
    """Delete one of the caller's tasks; responds 204 with no body."""
    await TaskService.delete_task(current_user["user_id"], task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
