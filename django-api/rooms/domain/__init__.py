from rooms.domain.interval_store import IntervalStore
from rooms.domain.models import Actor, Event, Room
from rooms.domain.value_objects import EventId, LayoutId, Precision, RoomId

__all__ = [
    "Actor",
    "Event",
    "Room",
    "IntervalStore",
    "EventId",
    "LayoutId",
    "RoomId",
    "Precision",
]
