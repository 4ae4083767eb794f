"""
Application package initializer.

The API is split into small layers: ``core`` holds configuration,
logging, persistence and security plumbing, ``schemas`` the pydantic
request/response models, ``services`` the business logic and
``api/<version>`` the HTTP routers that tie them together.
"""

from .main import app  # noqa: F401
