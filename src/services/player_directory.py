"""
Player Directory - maps connected sessions to their player identity and room.

This service handles:
- Session -> DirectoryEntry storage
- Lookup by session for every inbound event

It carries no business logic. The RoomRegistry is the only writer and keeps
it consistent with room rosters under its own lock.
"""

import logging
from typing import Dict, Optional

from src.core.models import DirectoryEntry

logger = logging.getLogger(__name__)


class PlayerDirectory:
    """Key-value store of DirectoryEntry objects keyed by session id."""

    def __init__(self):
        """Initialize the player directory."""
        self._entries: Dict[str, DirectoryEntry] = {}
        logger.info("PlayerDirectory initialized")

    def put(self, player_id: str, entry: DirectoryEntry) -> None:
        """Create or replace the entry for a session.

        Args:
            player_id: Socket.IO session id
            entry: Directory entry to store
        """
        self._entries[player_id] = entry
        logger.debug(f"Stored directory entry for {entry.name} ({player_id}) in room {entry.room_code}")

    def get(self, player_id: str) -> Optional[DirectoryEntry]:
        """Get the entry for a session, or None if unknown."""
        return self._entries.get(player_id)

    def remove(self, player_id: str) -> Optional[DirectoryEntry]:
        """Remove a session's entry.

        Returns:
            The removed entry or None if it was not present
        """
        entry = self._entries.pop(player_id, None)
        if entry:
            logger.debug(f"Removed directory entry for {entry.name} ({player_id})")
        return entry

    def count(self) -> int:
        """Get the total number of seated sessions."""
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
