"""Session issuer: exchange credentials for a JWT and turn a JWT back into a live principal."""

import logging

import jwt
from sqlalchemy import or_
from sqlalchemy.orm import Session

from tasktrack.core.database import run_in_store
from tasktrack.core.errors import AccountFrozen, AuthExpired, AuthRequired, InvalidCredentials
from tasktrack.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    decode_access_token,
    verify_password,
)
from tasktrack.models import Account
from tasktrack.schemas.auth import Principal

logger = logging.getLogger(__name__)


def authenticate(db: Session, identifier: str, password: str) -> tuple[str, Account]:
    """
    Verify credentials and issue an access token.

    identifier matches the email or the username exactly. Unknown identifier and
    wrong password both raise InvalidCredentials after one bcrypt comparison.
    A frozen account with the right password gets AccountFrozen and no token.
    """
    account = run_in_store(
        db,
        lambda s: s.query(Account)
        .filter(or_(Account.email == identifier, Account.username == identifier))
        .first(),
    )
    if account is None:
        verify_password(password, DUMMY_PASSWORD_HASH)
        raise InvalidCredentials()
    if not verify_password(password, account.password_hash):
        raise InvalidCredentials()
    if account.frozen:
        logger.info("Login refused for frozen account_id=%s", account.id)
        raise AccountFrozen()
    token = create_access_token(sub=account.id, role=account.role)
    logger.info("Login account_id=%s role=%s", account.id, account.role)
    return token, account


def verify(db: Session, token: str | None) -> Principal:
    """
    Decode token and resolve the live account behind it.

    The account row is read on every call so freezing (or deleting) an account
    revokes tokens issued before the change.
    """
    if not token:
        raise AuthRequired()
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError as e:
        raise AuthExpired() from e
    except jwt.PyJWTError as e:
        raise AuthRequired("Invalid token") from e
    try:
        account_id = int(payload.get("sub"))
    except (TypeError, ValueError) as e:
        raise AuthRequired("Invalid token payload") from e

    account = run_in_store(
        db, lambda s: s.query(Account).filter(Account.id == account_id).first()
    )
    if account is None:
        raise AuthRequired("Account not found")
    if account.frozen:
        raise AccountFrozen()
    return Principal(account_id=account.id, role=account.role, frozen=False)
