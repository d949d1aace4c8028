"""In-process implementation of the RoomStore.

Rooms are kept as documents and rebuilt on every load, so callers never share
mutable state with the store.
"""

import threading
from collections.abc import Iterable
from copy import deepcopy

from rooms.domain import Room, RoomId
from rooms.stores.interfaces import RoomStore, SaveResult


class InMemoryRoomStore(RoomStore):
    """Dictionary-backed room store with the same versioning as the database."""

    def __init__(self) -> None:
        self._documents: dict[RoomId, dict] = {}
        self._editors: dict[RoomId, set[str]] = {}
        self._lock = threading.Lock()

    def get_room_by_name(self, name: str) -> Room | None:
        with self._lock:
            for document in self._documents.values():
                if document["name"] == name:
                    return Room.from_document(deepcopy(document))
        return None

    def get_room_by_id(self, room_id: RoomId) -> Room | None:
        with self._lock:
            document = self._documents.get(room_id)
            if document is None:
                return None
            return Room.from_document(deepcopy(document))

    def save_room(self, room: Room) -> SaveResult:
        with self._lock:
            stored = self._documents.get(room.id)
            if stored is None or stored["version"] != room.version:
                return SaveResult.CONFLICT
            document = room.to_document()
            document["version"] = room.version + 1
            self._documents[room.id] = document
        room.version += 1
        return SaveResult.SAVED

    def room_name_exists(self, name: str) -> bool:
        with self._lock:
            return any(d["name"] == name for d in self._documents.values())

    def insert_room(self, room: Room) -> bool:
        with self._lock:
            if room.id in self._documents:
                return False
            if any(d["name"] == room.name for d in self._documents.values()):
                return False
            self._documents[room.id] = room.to_document()
            self._editors[room.id] = set()
        return True

    def delete_room(self, room_id: RoomId) -> bool:
        with self._lock:
            self._editors.pop(room_id, None)
            return self._documents.pop(room_id, None) is not None

    def list_rooms(self, room_ids: Iterable[RoomId] | None = None) -> list[Room]:
        with self._lock:
            documents = list(self._documents.values())
        if room_ids is not None:
            wanted = {str(room_id) for room_id in room_ids}
            documents = [d for d in documents if d["id"] in wanted]
        documents.sort(key=lambda d: d["name"])
        return [Room.from_document(deepcopy(d)) for d in documents]

    def editable_room_ids(self, user_id: str) -> frozenset[RoomId]:
        with self._lock:
            return frozenset(
                room_id for room_id, users in self._editors.items() if user_id in users
            )

    def grant_editor(self, room_id: RoomId, user_id: str) -> None:
        with self._lock:
            if room_id in self._editors:
                self._editors[room_id].add(user_id)
