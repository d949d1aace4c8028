"""Integration tests for DjangoRoomStore.

Run with: pytest tests/test_django_store.py -v
"""

from datetime import UTC, datetime

import pytest
from django.db import DatabaseError

from rooms import models
from rooms.domain import Event, LayoutId, Room, RoomId
from rooms.domain.errors import PersistenceError
from rooms.stores.django_store import DjangoRoomStore
from rooms.stores.interfaces import SaveResult


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 5, 6, hour, minute, tzinfo=UTC)


def make_event(start: datetime, stop: datetime) -> Event:
    event = Event.create("booker", "Meeting", "weekly", start, stop)
    assert event is not None
    return event


@pytest.fixture
def store() -> DjangoRoomStore:
    return DjangoRoomStore()


@pytest.fixture
def room(store: DjangoRoomStore) -> Room:
    room = Room.create("aula", description="main hall")
    assert store.insert_room(room)
    return room


@pytest.mark.django_db
class TestLoadAndInsert:
    """Tests for inserting and loading rooms."""

    def test_load_by_name_and_id(self, store, room):
        assert store.get_room_by_name("aula").id == room.id
        assert store.get_room_by_id(room.id).name == "aula"

    def test_missing_room_returns_none(self, store):
        assert store.get_room_by_name("cellar") is None
        assert store.get_room_by_id(RoomId.new()) is None

    def test_duplicate_name_not_inserted(self, store, room):
        assert not store.insert_room(Room.create("aula"))
        assert models.Room.objects.count() == 1

    def test_room_name_exists(self, store, room):
        assert store.room_name_exists("aula")
        assert not store.room_name_exists("cellar")

    def test_owner_is_kept(self, store, django_user_model):
        user = django_user_model.objects.create_user(username="owner", password="pw-12345")
        room = Room.create("office", owner=str(user.pk))
        store.insert_room(room)
        assert store.get_room_by_name("office").owner == str(user.pk)


@pytest.mark.django_db
class TestSave:
    """Tests for the versioned room write."""

    def test_save_round_trips_schedule(self, store, room):
        room.add_event(make_event(at(12), at(13)))
        room.add_event(make_event(at(9), at(10)))
        room.layouts.append(LayoutId.from_string("12345678-1234-5678-1234-567812345678"))
        room.layout_values["title"] = "Aula"

        assert store.save_room(room) is SaveResult.SAVED
        assert room.version == 1

        loaded = store.get_room_by_id(room.id)
        assert [e.start for e in loaded.events] == [at(9), at(12)]
        assert [e.id for e in loaded.events] == [e.id for e in room.events]
        assert loaded.layouts == room.layouts
        assert loaded.layout_values == {"title": "Aula"}
        assert loaded.version == 1

    def test_stale_save_conflicts(self, store, room):
        first = store.get_room_by_name("aula")
        second = store.get_room_by_name("aula")

        first.add_event(make_event(at(10), at(12)))
        assert store.save_room(first) is SaveResult.SAVED

        second.add_event(make_event(at(11), at(13)))
        assert store.save_room(second) is SaveResult.CONFLICT
        assert second.version == 0

        stored = store.get_room_by_name("aula")
        assert [e.start for e in stored.events] == [at(10)]

    def test_save_of_deleted_room_conflicts(self, store, room):
        store.delete_room(room.id)
        assert store.save_room(room) is SaveResult.CONFLICT

    def test_database_error_becomes_persistence_error(self, store, room, monkeypatch):
        def unavailable(*args, **kwargs):
            raise DatabaseError("down")

        monkeypatch.setattr(models.Room.objects, "filter", unavailable)
        with pytest.raises(PersistenceError):
            store.save_room(room)


@pytest.mark.django_db
class TestCorruptDocuments:
    """Tests for rooms whose stored document no longer decodes."""

    def test_malformed_event_document(self, store, room):
        models.Room.objects.filter(pk=room.id.value).update(events=[{"headline": "x"}])
        with pytest.raises(PersistenceError):
            store.get_room_by_name("aula")

    def test_overlapping_event_documents(self, store, room):
        documents = [
            make_event(at(10), at(12)).to_document(),
            make_event(at(11), at(13)).to_document(),
        ]
        models.Room.objects.filter(pk=room.id.value).update(events=documents)
        with pytest.raises(PersistenceError):
            store.get_room_by_id(room.id)

    def test_malformed_layout_id(self, store, room):
        models.Room.objects.filter(pk=room.id.value).update(layouts=["not-a-uuid"])
        with pytest.raises(PersistenceError):
            store.list_rooms()


@pytest.mark.django_db
class TestListingAndEditors:
    """Tests for listing, deleting and edit rights."""

    def test_list_rooms_ordered_by_name(self, store):
        for name in ("c", "a", "b"):
            store.insert_room(Room.create(name))
        assert [r.name for r in store.list_rooms()] == ["a", "b", "c"]

    def test_list_rooms_restricted(self, store):
        wanted = Room.create("a")
        store.insert_room(wanted)
        store.insert_room(Room.create("b"))
        assert [r.name for r in store.list_rooms([wanted.id])] == ["a"]
        assert store.list_rooms([]) == []

    def test_delete_room(self, store, room):
        assert store.delete_room(room.id)
        assert not store.delete_room(room.id)

    def test_grant_editor(self, store, room, django_user_model):
        user = django_user_model.objects.create_user(username="editor", password="pw-12345")
        assert store.editable_room_ids(str(user.pk)) == frozenset()

        store.grant_editor(room.id, str(user.pk))

        assert store.editable_room_ids(str(user.pk)) == frozenset({room.id})
