"""Shared test helpers: an in-memory SQLite store and account/task builders."""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tasktrack.core.security import hash_password
from tasktrack.models import Account, Base, Task
from tasktrack.models.account import ROLE_ADMIN, ROLE_USER
from tasktrack.schemas.auth import Principal

PASSWORD = "password123"
# Hashed once; bcrypt at cost 12 is too slow to repeat for every fixture account.
PASSWORD_HASH = hash_password(PASSWORD)


def make_session_factory(foreign_keys: bool = True) -> sessionmaker:
    """Fresh in-memory database shared by every session from the returned factory."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    if foreign_keys:

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):  # noqa: ANN001
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_account(
    db: Session,
    username: str,
    role: str = ROLE_USER,
    frozen: bool = False,
    is_protected: bool = False,
    email: str | None = None,
) -> Account:
    account = Account(
        email=email or f"{username}@example.com",
        username=username,
        password_hash=PASSWORD_HASH,
        role=role,
        frozen=frozen,
        is_protected=is_protected,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def add_admin(db: Session, username: str = "admin", is_protected: bool = False) -> Account:
    return add_account(db, username, role=ROLE_ADMIN, is_protected=is_protected)


def add_task(db: Session, owner: Account, title: str = "T1", **fields: object) -> Task:
    task = Task(title=title, owner_id=owner.id, **fields)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def principal_for(account: Account) -> Principal:
    return Principal(account_id=account.id, role=account.role, frozen=bool(account.frozen))
