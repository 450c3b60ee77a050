"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tasktrack.api.v1 import router as v1_router
from tasktrack.core.config import settings
from tasktrack.core.errors import (
    AuthError,
    DuplicateIdentity,
    Forbidden,
    InvalidCredentials,
    NotFound,
    ProtectedAccount,
    StoreUnavailable,
    TasktrackError,
    ValidationFailed,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Tasktrack API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


def _detail(status_code: int, detail: object, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)


def error_response(exc: TasktrackError) -> JSONResponse:
    """Map a domain error to its status code and a caller-safe body."""
    if isinstance(exc, ValidationFailed):
        return _detail(status.HTTP_422_UNPROCESSABLE_ENTITY, exc.errors or exc.message)
    if isinstance(exc, InvalidCredentials):
        return _detail(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")
    if isinstance(exc, AuthError):
        # Expired, tampered, missing and frozen all look the same from outside.
        return _detail(status.HTTP_401_UNAUTHORIZED, "Not authenticated", UNAUTHORIZED_HEADERS)
    if isinstance(exc, ProtectedAccount):
        detail = "Protected account" if exc.actor_is_admin else "Forbidden"
        return _detail(status.HTTP_403_FORBIDDEN, detail)
    if isinstance(exc, Forbidden):
        return _detail(status.HTTP_403_FORBIDDEN, "Forbidden")
    if isinstance(exc, NotFound):
        return _detail(status.HTTP_404_NOT_FOUND, exc.message)
    if isinstance(exc, DuplicateIdentity):
        return _detail(status.HTTP_409_CONFLICT, "Email or username already taken")
    if isinstance(exc, StoreUnavailable):
        return _detail(status.HTTP_503_SERVICE_UNAVAILABLE, "Service temporarily unavailable")
    logger.error("Unmapped domain error: %s", type(exc).__name__)
    return _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.exception_handler(TasktrackError)
async def handle_domain_error(request: Request, exc: TasktrackError) -> JSONResponse:
    if isinstance(exc, AuthError):
        logger.info("Auth failure path=%s kind=%s", request.url.path, type(exc).__name__)
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    return _detail(status.HTTP_422_UNPROCESSABLE_ENTITY, errors)


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error path=%s", request.url.path)
    return _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Tasktrack API"}
