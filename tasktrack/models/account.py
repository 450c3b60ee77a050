"""ORM model for accounts (credentials, role and lifecycle state)."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, false, func, text

from tasktrack.models.base import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


class Account(Base):
    """
    Account for JWT authentication and role-based access control.

    role: 'admin' or 'user' (standard account)
    frozen: a frozen account cannot authenticate or act
    is_protected: set once when the primordial admin is provisioned; exempts the
    account from role change, freeze and deletion
    """

    __tablename__ = "accounts"
    __table_args__ = (
        # At most one primordial admin.
        Index(
            "uq_accounts_single_protected",
            "is_protected",
            unique=True,
            postgresql_where=text("is_protected"),
            sqlite_where=text("is_protected = 1"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_USER)
    frozen = Column(Boolean, nullable=False, default=False, server_default=false())
    is_protected = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
