"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in rooms/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Self

from rooms.domain.interval_store import IntervalStore
from rooms.domain.value_objects import EventId, LayoutId, Precision, RoomId


def _truncate(value: datetime, precision: Precision) -> datetime:
    if precision is Precision.MINUTE:
        return value.replace(second=0, microsecond=0)
    return value.replace(microsecond=0)


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


@dataclass(frozen=True, eq=False)
class Event:
    """A single reservation of a room.

    Events sort by ``start``; that is the key the interval store places and
    looks them up by. Equality and hashing go through ``id``.
    """

    id: EventId
    booker_id: str
    headline: str
    description: str | None
    start: datetime
    stop: datetime
    is_probe: bool = False

    @classmethod
    def create(
        cls,
        booker_id: str,
        headline: str,
        description: str | None,
        start: datetime,
        stop: datetime,
        precision: Precision = Precision.MINUTE,
    ) -> Self | None:
        """Validate the fields and build a new event.

        Returns None when the booker or headline is empty, a bound is naive,
        or the bounds do not describe a positive span after truncation.
        """
        if not booker_id or not headline:
            return None
        if not (_is_aware(start) and _is_aware(stop)):
            return None
        start = _truncate(start, precision)
        stop = _truncate(stop, precision)
        if start >= stop:
            return None
        return cls(
            id=EventId.new(),
            booker_id=booker_id,
            headline=headline,
            description=description or None,
            start=start,
            stop=stop,
        )

    @classmethod
    def probe(cls, instant: datetime) -> Self:
        """Zero-width sentinel used to search a store by instant. Never stored."""
        return cls(
            id=EventId.new(),
            booker_id="",
            headline="",
            description=None,
            start=instant,
            stop=instant,
            is_probe=True,
        )

    def overlaps(self, other: "Event") -> bool:
        """True if either bound of ``other`` lies strictly inside this event."""
        return self.contains_instant(other.start) or self.contains_instant(other.stop)

    def touches_boundary(self, other: "Event") -> bool:
        return self.start == other.stop or self.stop == other.start

    def contains_instant(self, instant: datetime) -> bool:
        return self.start < instant < self.stop

    def to_document(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "booker_id": self.booker_id,
            "headline": self.headline,
            "description": self.description,
            "start": self.start.isoformat(),
            "stop": self.stop.isoformat(),
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        return cls(
            id=EventId.from_string(document["id"]),
            booker_id=document["booker_id"],
            headline=document["headline"],
            description=document.get("description"),
            start=datetime.fromisoformat(document["start"]),
            stop=datetime.fromisoformat(document["stop"]),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: "Event") -> bool:
        return self.start < other.start


@dataclass
class Room:
    """A bookable room and its schedule.

    All changes to the schedule go through the methods below; persisting the
    room afterwards is up to the caller.
    """

    id: RoomId
    name: str
    events: IntervalStore = field(default_factory=IntervalStore)
    layouts: list[LayoutId] = field(default_factory=list)
    layout_values: dict[str, str] = field(default_factory=dict)
    owner: str | None = None
    description: str | None = None
    version: int = 0

    @classmethod
    def create(
        cls,
        name: str,
        owner: str | None = None,
        description: str | None = None,
    ) -> Self:
        return cls(id=RoomId.new(), name=name, owner=owner, description=description)

    def can_accommodate(self, event: Event) -> bool:
        return self.events.can_accommodate(event)

    def add_event(self, event: Event) -> bool:
        return self.events.insert(event)

    def remove_event_at(self, instant: datetime) -> Event | None:
        return self.events.remove_by_instant(instant)

    def events_between(self, start: datetime, stop: datetime) -> tuple[Event, ...]:
        return self.events.range_query(start, stop)

    def to_document(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "events": [event.to_document() for event in self.events],
            "layouts": [str(layout) for layout in self.layouts],
            "layout_values": dict(self.layout_values),
            "owner": self.owner,
            "description": self.description,
            "version": self.version,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        return cls(
            id=RoomId.from_string(document["id"]),
            name=document["name"],
            events=IntervalStore(Event.from_document(d) for d in document["events"]),
            layouts=[LayoutId.from_string(v) for v in document.get("layouts", [])],
            layout_values=dict(document.get("layout_values", {})),
            owner=document.get("owner"),
            description=document.get("description"),
            version=document.get("version", 0),
        )


@dataclass(frozen=True)
class Actor:
    """Permissions of the authenticated user making a request."""

    id: str
    is_admin: bool = False
    editable_room_ids: frozenset[RoomId] = frozenset()

    def can_create_rooms(self) -> bool:
        return self.is_admin

    def can_edit_room(self, room_id: RoomId) -> bool:
        return self.is_admin or room_id in self.editable_room_ids
