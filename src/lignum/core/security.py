"""Bearer token helpers.

Credential issuance lives outside this service; tokens only carry the id of an
already-authenticated user in the ``sub`` claim.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from lignum.core.settings import settings


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be decoded into a user id."""


def create_access_token(user_id: int, extra_claims: dict[str, str] | None = None) -> str:
    """Create a signed JWT access token for ``user_id``."""
    to_encode: dict[str, object] = {"sub": str(user_id)}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_user_id(token: str) -> int:
    """Return the user id carried by ``token``.

    Raises:
        InvalidTokenError: If the signature, expiry or subject is invalid.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise InvalidTokenError("Could not validate credentials") from err

    subject = payload.get("sub")
    if subject is None:
        raise InvalidTokenError("Token has no subject")
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise InvalidTokenError("Token subject is not a user id") from err
