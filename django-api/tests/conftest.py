"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from rooms.domain import Actor
from rooms.services import RoomService
from rooms.stores import InMemoryRoomStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def store() -> InMemoryRoomStore:
    return InMemoryRoomStore()


@pytest.fixture
def service(store: InMemoryRoomStore) -> RoomService:
    return RoomService(store)


@pytest.fixture
def admin() -> Actor:
    return Actor(id="1", is_admin=True)


@pytest.fixture
def member() -> Actor:
    return Actor(id="2")
