from rooms.handlers.views import (
    RoomDetailView,
    RoomEditorsView,
    RoomEventsView,
    RoomListView,
)

__all__ = [
    "RoomDetailView",
    "RoomEditorsView",
    "RoomEventsView",
    "RoomListView",
]
