"""Tests for the development token script."""

from lignum.core.security import decode_user_id
from lignum.models import User
from lignum.scripts.tokens import issue_token


def test_issue_token_creates_user_once(db_session) -> None:
    user, token = issue_token(db_session, "dora@example.com", "Dora")
    again, _ = issue_token(db_session, "dora@example.com")

    assert again.id == user.id
    assert user.name == "Dora"
    assert decode_user_id(token) == user.id
    assert db_session.query(User).count() == 1


def test_name_defaults_to_mailbox(db_session) -> None:
    user, _ = issue_token(db_session, "eve@example.com")
    assert user.name == "eve"
