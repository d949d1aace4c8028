from rooms.services.room_service import RoomRef, RoomService

__all__ = ["RoomRef", "RoomService"]
