# src/lignum/scripts/tokens.py
"""Mint bearer tokens for local development.

Identity is managed outside this service, so in development a user row is
created on demand and a signed token printed for it::

    python -m lignum.scripts.tokens --email ana@example.com --name Ana
"""

from __future__ import annotations

import argparse

from sqlalchemy.orm import Session

from lignum.core.security import create_access_token
from lignum.db.gateway import transaction
from lignum.db.session import SessionLocal
from lignum.models import User


def ensure_user(db: Session, email: str, name: str | None = None) -> User:
    """Return the user with ``email``, creating it when missing."""
    user = db.query(User).filter(User.email == email).first()
    if user is not None:
        return user
    with transaction(db):
        user = User(email=email, name=name or email.split("@", 1)[0])
        db.add(user)
    return user


def issue_token(db: Session, email: str, name: str | None = None) -> tuple[User, str]:
    user = ensure_user(db, email, name)
    return user, create_access_token(user.id)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Mint a development bearer token")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default=None)
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user, token = issue_token(db, args.email, args.name)
    finally:
        db.close()
    print(f"user_id={user.id}")
    print(token)


if __name__ == "__main__":
    main()
