"""Shared API dependencies for authentication and realtime collaborators."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from lignum.core.security import InvalidTokenError, decode_user_id
from lignum.db.session import get_db
from lignum.models import User
from lignum.services.broadcaster import RoomBroadcaster
from lignum.services.context import MutationContext
from lignum.services.locking import BoardLocks

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the bearer token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If the token is missing or invalid, or the user does not exist
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        user_id = decode_user_id(credentials.credentials)
    except InvalidTokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_broadcaster(request: Request) -> RoomBroadcaster:
    """Return the broadcaster built at application startup."""
    return request.app.state.broadcaster


def get_board_locks(request: Request) -> BoardLocks:
    return request.app.state.board_locks


BroadcasterDep = Annotated[RoomBroadcaster, Depends(get_broadcaster)]
LocksDep = Annotated[BoardLocks, Depends(get_board_locks)]


def get_mutation_context(
    db: SessionDep,
    current_user: CurrentUserDep,
    broadcaster: BroadcasterDep,
    locks: LocksDep,
) -> MutationContext:
    """Bundle what a board mutation needs for one request."""
    return MutationContext(
        db=db,
        actor_id=current_user.id,
        broadcaster=broadcaster,
        locks=locks,
    )


MutationDep = Annotated[MutationContext, Depends(get_mutation_context)]
