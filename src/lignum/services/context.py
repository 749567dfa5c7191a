"""Everything a mutation handler needs besides its input."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from lignum.services.broadcaster import RoomBroadcaster
from lignum.services.locking import BoardLocks


@dataclass
class MutationContext:
    """Per-request bundle of session, acting user and realtime collaborators."""

    db: Session
    actor_id: int
    broadcaster: RoomBroadcaster
    locks: BoardLocks
