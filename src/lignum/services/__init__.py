# src/lignum/services/__init__.py
"""Board mutation handlers and the realtime collaborators they share."""

from .access import AccessGuard
from .broadcaster import RoomBroadcaster
from .context import MutationContext
from .locking import BoardLocks

__all__ = [
    "AccessGuard",
    "BoardLocks",
    "MutationContext",
    "RoomBroadcaster",
]
