"""
Domain exceptions and their HTTP mapping.

Services raise the exceptions defined here; ``register_exception_handlers``
turns them (and the framework's own validation and HTTP errors) into
JSON responses of the form ``{"error": CODE, "message": text, ...}``.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings

logger = logging.getLogger(__name__)


class TaskTrackerError(Exception):
    """Base class for all application errors.

    Attributes
    ----------
    message : str
        Human‑readable description.
    error_code : str
        Machine‑readable code used in the response body.
    details : dict
        Extra context merged into the response body.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error_code, "message": self.message, **self.details}


class TaskNotFoundError(TaskTrackerError):
    """No task with this ID exists for the calling user.

    Raised both when the task does not exist and when it belongs to
    another user, so the response never reveals which of the two it is.
    """

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__("Task not found", "TASK_NOT_FOUND")


class TaskValidationError(TaskTrackerError):
    """One or more input fields failed validation.

    ``errors`` maps each failing field name to a list of reasons.
    """

    status_code = 422

    def __init__(self, errors: Dict[str, List[str]]) -> None:
        self.errors = errors
        super().__init__(
            "The given data was invalid",
            "VALIDATION_ERROR",
            {"errors": errors},
        )


def errors_by_field(errors: Iterable[Dict[str, Any]]) -> Dict[str, List[str]]:
    """Group pydantic error entries by the field they refer to.

    The location prefix added by FastAPI (``body``, ``path``, ``query``)
    is dropped, so ``("body", "title")`` is reported as ``title``.  An
    error about the body as a whole is reported under ``body``.
    """
    grouped: Dict[str, List[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if error.get("type") == "json_invalid":
            loc = []
        elif loc and loc[0] in {"body", "path", "query"} and len(loc) > 1:
            loc = loc[1:]
        field = ".".join(loc) or "body"
        grouped.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return grouped


def _task_tracker_error_handler(request: Request, exc: TaskTrackerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reshape framework validation errors like ``TaskValidationError``."""
    return _task_tracker_error_handler(request, TaskValidationError(errors_by_field(exc.errors())))


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include the exception text only in debug mode."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    detail = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""
    app.add_exception_handler(TaskTrackerError, _task_tracker_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
