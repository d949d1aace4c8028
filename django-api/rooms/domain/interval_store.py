"""Ordered, non-overlapping collection of a room's events.

Events are kept sorted by ``start`` in a plain list and located with
``bisect``, which gives O(log n) neighbour lookups. Adjacent events may share
a boundary instant; any other intersection is rejected.
"""

import logging
from bisect import bisect_left
from collections.abc import Iterable, Iterator
from datetime import datetime
from operator import attrgetter
from typing import TYPE_CHECKING

from rooms.domain.errors import ProbeInsertError
from rooms.domain.value_objects import EventId

if TYPE_CHECKING:
    from rooms.domain.models import Event

logger = logging.getLogger(__name__)

_start = attrgetter("start")


class IntervalStore:
    """Events of one room, sorted by start."""

    def __init__(self, events: Iterable["Event"] = ()) -> None:
        self._events: list["Event"] = []
        for event in events:
            if not self.insert(event):
                raise ValueError(f"Overlapping event {event.id} in stored schedule")

    def can_accommodate(self, candidate: "Event") -> bool:
        """Return True if ``candidate`` is cleanly separated from every stored event.

        Touching at a boundary counts as separated.
        """
        if candidate.is_probe:
            return False
        for event in self._events:
            if not (event.start >= candidate.stop or event.stop <= candidate.start):
                return False
        return True

    def insert(self, event: "Event") -> bool:
        """Insert ``event`` in start order.

        Returns False, leaving the store unchanged, when the slot is taken or
        an event with the same start already exists.

        Raises:
            ProbeInsertError: If ``event`` is a lookup probe.
        """
        if event.is_probe:
            raise ProbeInsertError("tried to insert a probe event")
        if not self.can_accommodate(event):
            return False
        index = bisect_left(self._events, event.start, key=_start)
        if index < len(self._events) and self._events[index].start == event.start:
            return False
        self._events.insert(index, event)
        return True

    def remove_by_instant(self, instant: datetime) -> "Event | None":
        """Remove the event that starts at or spans ``instant``.

        An event starting exactly at ``instant`` wins; otherwise the nearest
        event starting before it is removed if it strictly contains it.
        """
        index = bisect_left(self._events, instant, key=_start)
        if index < len(self._events) and self._events[index].start == instant:
            return self._events.pop(index)
        if index > 0 and self._events[index - 1].contains_instant(instant):
            return self._events.pop(index - 1)
        logger.debug("no event at %s", instant.isoformat())
        return None

    def range_query(self, start: datetime, stop: datetime) -> tuple["Event", ...]:
        """Return events fully inside ``[start, stop]``, in start order."""
        found = []
        index = bisect_left(self._events, start, key=_start)
        for event in self._events[index:]:
            if event.start >= stop:
                break
            if event.stop <= stop:
                found.append(event)
        return tuple(found)

    def get(self, event_id: EventId) -> "Event | None":
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def __iter__(self) -> Iterator["Event"]:
        return iter(tuple(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event: object) -> bool:
        return event in self._events

    def __repr__(self) -> str:
        return f"IntervalStore({len(self._events)} events)"
