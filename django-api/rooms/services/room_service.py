"""Room service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every write follows the same cycle: load the room, apply one scheduling
operation in memory, save the room back conditionally on the version it was
loaded at. A stale save re-runs the whole cycle.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Self, TypeVar

from rooms.domain import Actor, Event, Precision, Room, RoomId
from rooms.domain.errors import (
    ConcurrencyConflictError,
    EventNotFoundError,
    InvalidEventError,
    InvalidQueryError,
    InvalidRoomIdError,
    PermissionDeniedError,
    RoomNameTakenError,
    RoomNotFoundError,
    SlotUnavailableError,
)
from rooms.stores.interfaces import RoomStore, SaveResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class RoomRef:
    """Addresses a room either by ID or by name."""

    room_id: RoomId | None = None
    name: str | None = None

    @classmethod
    def by_name(cls, name: str) -> Self:
        return cls(name=name)

    @classmethod
    def by_id(cls, room_id: str) -> Self:
        """Raises InvalidRoomIdError if ``room_id`` is not a UUID."""
        try:
            return cls(room_id=RoomId.from_string(room_id))
        except ValueError:
            raise InvalidRoomIdError() from None

    def __str__(self) -> str:
        return str(self.room_id) if self.room_id is not None else str(self.name)


class RoomService:
    """Service for room and reservation operations."""

    def __init__(
        self,
        store: RoomStore,
        precision: Precision = Precision.MINUTE,
        save_retries: int = 3,
        timezone: tzinfo = UTC,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._precision = precision
        self._save_retries = save_retries
        self._timezone = timezone
        self._clock = clock or (lambda: datetime.now(UTC))

    def actor_for(self, user_id: str, is_admin: bool = False) -> Actor:
        """Snapshot the permissions of a user for one request."""
        if is_admin:
            return Actor(id=user_id, is_admin=True)
        return Actor(id=user_id, editable_room_ids=self._store.editable_room_ids(user_id))

    def list_rooms(self, actor: Actor) -> list[Room]:
        """Return all rooms for admins, otherwise the rooms the actor may edit."""
        if actor.is_admin:
            return self._store.list_rooms()
        return self._store.list_rooms(actor.editable_room_ids)

    def create_room(self, actor: Actor, name: str, description: str | None = None) -> Room:
        """Create an empty room owned by the actor.

        Raises:
            PermissionDeniedError: If the actor may not create rooms.
            RoomNameTakenError: If the name is already in use.
        """
        if not actor.can_create_rooms():
            raise PermissionDeniedError()
        if self._store.room_name_exists(name):
            raise RoomNameTakenError(name)
        room = Room.create(name, owner=actor.id, description=description)
        if not self._store.insert_room(room):
            raise RoomNameTakenError(name)
        logger.info("room %s created as %r by user %s", room.id, name, actor.id)
        return room

    def delete_room(self, actor: Actor, ref: RoomRef) -> None:
        """Delete a room together with all of its events.

        Raises:
            RoomNotFoundError: If the room does not exist.
            PermissionDeniedError: If the actor may not edit the room.
        """
        room = self._load_editable(actor, ref)
        if not self._store.delete_room(room.id):
            raise RoomNotFoundError(str(ref))
        logger.info("room %s deleted by user %s", room.id, actor.id)

    def get_room(self, actor: Actor, ref: RoomRef) -> Room:
        """Return a room with its full schedule.

        Raises:
            RoomNotFoundError: If the room does not exist.
            PermissionDeniedError: If the actor may not edit the room.
        """
        return self._load_editable(actor, ref)

    def grant_editor(self, actor: Actor, ref: RoomRef, user_id: str) -> None:
        """Let another user edit a room. Only admins may hand out rights."""
        if not actor.is_admin:
            raise PermissionDeniedError()
        room = self._load(ref)
        self._store.grant_editor(room.id, user_id)
        logger.info("user %s may now edit room %s", user_id, room.id)

    def add_event(
        self,
        actor: Actor,
        ref: RoomRef,
        headline: str,
        description: str | None,
        start: datetime,
        stop: datetime,
    ) -> Event:
        """Book a time slot in a room for the actor.

        Raises:
            InvalidEventError: If the event fields are invalid.
            RoomNotFoundError: If the room does not exist.
            PermissionDeniedError: If the actor may not edit the room.
            SlotUnavailableError: If the slot overlaps an existing event.
            ConcurrencyConflictError: If the room kept changing during the write.
        """
        event = Event.create(
            actor.id, headline, description, start, stop, precision=self._precision
        )
        if event is None:
            raise InvalidEventError()

        def book(room: Room) -> Event:
            if not room.add_event(event):
                raise SlotUnavailableError()
            return event

        self._commit(actor, ref, book)
        logger.info(
            "event %s booked in room %s from %s to %s",
            event.id,
            ref,
            event.start.isoformat(),
            event.stop.isoformat(),
        )
        return event

    def remove_event(self, actor: Actor, ref: RoomRef, instant: datetime) -> Event:
        """Remove the event starting at or spanning ``instant``.

        Raises:
            RoomNotFoundError: If the room does not exist.
            PermissionDeniedError: If the actor may not edit the room.
            EventNotFoundError: If no event covers the instant.
            InvalidQueryError: If the instant has no UTC offset.
            ConcurrencyConflictError: If the room kept changing during the write.
        """
        if instant.tzinfo is None:
            raise InvalidQueryError("Instant needs a UTC offset")

        def cancel(room: Room) -> Event:
            removed = room.remove_event_at(instant)
            if removed is None:
                raise EventNotFoundError(str(ref))
            return removed

        removed = self._commit(actor, ref, cancel)
        logger.info("event %s removed from room %s", removed.id, ref)
        return removed

    def get_event_range(
        self, actor: Actor, ref: RoomRef, start: datetime, stop: datetime
    ) -> tuple[Event, ...]:
        """Return events lying entirely within ``[start, stop]``.

        Raises:
            InvalidQueryError: If the window is empty or has naive bounds.
            RoomNotFoundError: If the room does not exist.
            PermissionDeniedError: If the actor may not edit the room.
        """
        if start.tzinfo is None or stop.tzinfo is None:
            raise InvalidQueryError("Time range bounds need a UTC offset")
        if start >= stop:
            raise InvalidQueryError("Range start must be before its stop")
        room = self._load_editable(actor, ref)
        return room.events_between(start, stop)

    def get_events_for_day(
        self, actor: Actor, ref: RoomRef, day: date | None = None, offset: int = 0
    ) -> tuple[Event, ...]:
        """Return the events of one calendar day in the service time zone.

        ``day`` defaults to today; ``offset`` shifts it by whole days.

        Raises:
            InvalidQueryError: If the day lies at the edge of the calendar.
        """
        if day is None:
            day = self._clock().astimezone(self._timezone).date()
        try:
            day += timedelta(days=offset)
            start = datetime.combine(day, time.min, tzinfo=self._timezone)
            stop = datetime.combine(day + ONE_DAY, time.min, tzinfo=self._timezone)
        except OverflowError:
            raise InvalidQueryError("Day out of range") from None
        return self.get_event_range(actor, ref, start, stop)

    def get_events_from(
        self, actor: Actor, ref: RoomRef, since: datetime
    ) -> tuple[Event, ...]:
        """Return the events in the 24 hours following ``since``."""
        try:
            stop = since + ONE_DAY
        except OverflowError:
            raise InvalidQueryError("Instant out of range") from None
        return self.get_event_range(actor, ref, since, stop)

    def _load(self, ref: RoomRef) -> Room:
        if ref.room_id is not None:
            room = self._store.get_room_by_id(ref.room_id)
        elif ref.name is not None:
            room = self._store.get_room_by_name(ref.name)
        else:
            room = None
        if room is None:
            raise RoomNotFoundError(str(ref))
        return room

    def _load_editable(self, actor: Actor, ref: RoomRef) -> Room:
        room = self._load(ref)
        if not actor.can_edit_room(room.id):
            raise PermissionDeniedError()
        return room

    def _commit(self, actor: Actor, ref: RoomRef, mutate: Callable[[Room], T]) -> T:
        for attempt in range(self._save_retries + 1):
            room = self._load_editable(actor, ref)
            result = mutate(room)
            if self._store.save_room(room) is SaveResult.SAVED:
                return result
            logger.warning(
                "room %s changed while saving (attempt %d/%d)",
                ref,
                attempt + 1,
                self._save_retries + 1,
            )
        raise ConcurrencyConflictError()
