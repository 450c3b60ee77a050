"""Registration, login and the bearer-token dependency every protected route uses."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tasktrack.core.database import get_db
from tasktrack.schemas.auth import (
    AccountOut,
    LoginRequest,
    Principal,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)
from tasktrack.services import accounts, sessions
from tasktrack.services.authorization import ACTION_LIST, Intent, authorize

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> Principal:
    """Dependency: require a valid Bearer JWT for a live, unfrozen account."""
    token = credentials.credentials if credentials is not None else None
    return sessions.verify(db, token)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> RegisterResponse:
    """Create a standard account. Email and username must both be unused."""
    account = accounts.register(db, body.email, body.username, body.password)
    return RegisterResponse(id=account.id)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with email or username plus password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    token, account = sessions.authenticate(db, body.identifier, body.password)
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        account=AccountOut.model_validate(account),
    )


@router.get("/me", response_model=Principal)
def me(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    return principal


def require_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Dependency: gate a whole router on the admin-console permission (account listing)."""
    authorize(principal, Intent(action=ACTION_LIST, resource_kind="account"))
    return principal
