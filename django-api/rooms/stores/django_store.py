"""Django ORM implementation of the RoomStore."""

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from rooms import models
from rooms.domain import Event, IntervalStore, LayoutId, Room, RoomId
from rooms.domain.errors import PersistenceError
from rooms.stores.interfaces import RoomStore, SaveResult

logger = logging.getLogger(__name__)


@contextmanager
def _database_errors() -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        logger.exception("room store operation failed")
        raise PersistenceError() from exc


def _to_domain(row: models.Room) -> Room:
    try:
        events = IntervalStore(Event.from_document(d) for d in row.events)
        layouts = [LayoutId.from_string(v) for v in row.layouts]
        layout_values = dict(row.layout_values)
    except (KeyError, TypeError, ValueError) as exc:
        logger.exception("stored document of room %s is corrupt", row.id)
        raise PersistenceError() from exc
    return Room(
        id=RoomId(value=row.id),
        name=row.name,
        events=events,
        layouts=layouts,
        layout_values=layout_values,
        owner=str(row.owner_id) if row.owner_id is not None else None,
        description=row.description,
        version=row.version,
    )


def _columns(room: Room) -> dict:
    return {
        "name": room.name,
        "description": room.description,
        "owner_id": room.owner,
        "events": [event.to_document() for event in room.events],
        "layouts": [str(layout) for layout in room.layouts],
        "layout_values": dict(room.layout_values),
    }


class DjangoRoomStore(RoomStore):
    """Database-backed room store using Django ORM."""

    def get_room_by_name(self, name: str) -> Room | None:
        with _database_errors():
            row = models.Room.objects.filter(name=name).first()
        return _to_domain(row) if row is not None else None

    def get_room_by_id(self, room_id: RoomId) -> Room | None:
        with _database_errors():
            row = models.Room.objects.filter(pk=room_id.value).first()
        return _to_domain(row) if row is not None else None

    def save_room(self, room: Room) -> SaveResult:
        with _database_errors():
            updated = models.Room.objects.filter(
                pk=room.id.value, version=room.version
            ).update(
                **_columns(room),
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
        if updated == 0:
            logger.info("stale write to room %s at version %d", room.id, room.version)
            return SaveResult.CONFLICT
        room.version += 1
        return SaveResult.SAVED

    def room_name_exists(self, name: str) -> bool:
        with _database_errors():
            return models.Room.objects.filter(name=name).exists()

    def insert_room(self, room: Room) -> bool:
        try:
            with transaction.atomic():
                models.Room.objects.create(
                    id=room.id.value, version=room.version, **_columns(room)
                )
        except IntegrityError:
            logger.info("room %r already exists", room.name)
            return False
        except DatabaseError as exc:
            logger.exception("room store operation failed")
            raise PersistenceError() from exc
        return True

    def delete_room(self, room_id: RoomId) -> bool:
        with _database_errors():
            deleted, _ = models.Room.objects.filter(pk=room_id.value).delete()
        return deleted > 0

    def list_rooms(self, room_ids: Iterable[RoomId] | None = None) -> list[Room]:
        queryset = models.Room.objects.order_by("name")
        if room_ids is not None:
            queryset = queryset.filter(pk__in=[room_id.value for room_id in room_ids])
        with _database_errors():
            return [_to_domain(row) for row in queryset]

    def editable_room_ids(self, user_id: str) -> frozenset[RoomId]:
        with _database_errors():
            ids = models.Room.objects.filter(editors__pk=user_id).values_list(
                "id", flat=True
            )
            return frozenset(RoomId(value=value) for value in ids)

    def grant_editor(self, room_id: RoomId, user_id: str) -> None:
        with _database_errors():
            row = models.Room.objects.get(pk=room_id.value)
            row.editors.add(user_id)
