"""
Provision an admin account. Run from project root:
  python -m tasktrack.scripts.create_admin EMAIL USERNAME PASSWORD [--protected]
Example (the primordial admin, exempt from role change, freeze and deletion):
  python -m tasktrack.scripts.create_admin root@example.com root your-secure-password --protected
"""
import argparse
import re
import sys

from sqlalchemy import or_

from tasktrack.core.database import SessionLocal
from tasktrack.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from tasktrack.models import Account
from tasktrack.models.account import ROLE_ADMIN
from tasktrack.schemas.auth import EMAIL_PATTERN


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Tasktrack admin account.")
    parser.add_argument("email", help=f"Email (at most {EMAIL_MAX_LEN} chars)")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "--protected",
        action="store_true",
        help="Mark as the primordial admin (only one may exist)",
    )
    args = parser.parse_args(argv)

    email = args.email.strip()
    username = args.username.strip()
    if len(email) > EMAIL_MAX_LEN or not re.match(EMAIL_PATTERN, email):
        print("Invalid email.", file=sys.stderr)
        return 1
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        existing = (
            db.query(Account)
            .filter(or_(Account.email == email, Account.username == username))
            .first()
        )
        if existing:
            print("Email or username already taken.", file=sys.stderr)
            return 1
        if args.protected and db.query(Account).filter(Account.is_protected.is_(True)).first():
            print("A protected admin already exists.", file=sys.stderr)
            return 1
        account = Account(
            email=email,
            username=username,
            password_hash=hash_password(args.password),
            role=ROLE_ADMIN,
            frozen=False,
            is_protected=args.protected,
        )
        db.add(account)
        db.commit()
        kind = "protected admin" if args.protected else "admin"
        print(f"Created {kind} '{username}' (id {account.id}).")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
