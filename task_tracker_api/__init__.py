"""
Top‑level package for the Task Tracker API.

The package itself exports nothing; the application lives in the
``app`` subpackage and is importable as ``task_tracker_api.app.main``
so that tests and ASGI servers resolve modules by their fully
qualified names.
"""

__all__ = []
