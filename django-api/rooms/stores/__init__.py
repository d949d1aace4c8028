from rooms.stores.interfaces import RoomStore, SaveResult
from rooms.stores.memory_store import InMemoryRoomStore

__all__ = ["InMemoryRoomStore", "RoomStore", "SaveResult"]
