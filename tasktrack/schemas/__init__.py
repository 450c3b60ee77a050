"""Pydantic request/response schemas."""

from tasktrack.schemas.auth import (
    AccountOut,
    AccountsListResponse,
    LoginRequest,
    Principal,
    RegisterRequest,
    TokenResponse,
)
from tasktrack.schemas.health import HealthResponse
from tasktrack.schemas.tasks import (
    AdminTaskCreate,
    TaskCreate,
    TaskFilters,
    TaskOut,
    TasksListResponse,
    TaskUpdate,
)

__all__ = [
    "AccountOut",
    "AccountsListResponse",
    "AdminTaskCreate",
    "HealthResponse",
    "LoginRequest",
    "Principal",
    "RegisterRequest",
    "TaskCreate",
    "TaskFilters",
    "TaskOut",
    "TasksListResponse",
    "TaskUpdate",
    "TokenResponse",
]
