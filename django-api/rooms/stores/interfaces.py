"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum

from rooms.domain import Room, RoomId


class SaveResult(Enum):
    """Outcome of a conditional room write."""

    SAVED = "saved"
    CONFLICT = "conflict"


class RoomStore(ABC):
    """Interface for room persistence operations.

    Infrastructure failures surface as PersistenceError.
    """

    @abstractmethod
    def get_room_by_name(self, name: str) -> Room | None:
        """Return a room by name, or None if not found."""
        ...

    @abstractmethod
    def get_room_by_id(self, room_id: RoomId) -> Room | None:
        """Return a room by ID, or None if not found."""
        ...

    @abstractmethod
    def save_room(self, room: Room) -> SaveResult:
        """Write the whole room back if nobody changed it since it was loaded.

        Compares ``room.version`` with the stored version. On SAVED the
        room's version is advanced to the stored one; on CONFLICT nothing
        is written.
        """
        ...

    @abstractmethod
    def room_name_exists(self, name: str) -> bool:
        """Check if a room with this name exists."""
        ...

    @abstractmethod
    def insert_room(self, room: Room) -> bool:
        """Store a new room. Return False if its name or ID is taken."""
        ...

    @abstractmethod
    def delete_room(self, room_id: RoomId) -> bool:
        """Delete a room with its events. Return False if it did not exist."""
        ...

    @abstractmethod
    def list_rooms(self, room_ids: Iterable[RoomId] | None = None) -> list[Room]:
        """Return rooms ordered by name, optionally restricted to ``room_ids``."""
        ...

    @abstractmethod
    def editable_room_ids(self, user_id: str) -> frozenset[RoomId]:
        """Return the IDs of rooms the user was granted edit rights on."""
        ...

    @abstractmethod
    def grant_editor(self, room_id: RoomId, user_id: str) -> None:
        """Allow a user to edit a room."""
        ...
