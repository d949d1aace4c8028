"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from rooms.domain import Actor, Precision
from rooms.domain.errors import DomainError, ErrorCode
from rooms.handlers.serializers import (
    CreateEventSerializer,
    CreateRoomSerializer,
    EventRangeQuerySerializer,
    EventSerializer,
    GrantEditorSerializer,
    RemoveEventSerializer,
    RoomSerializer,
    RoomSummarySerializer,
)
from rooms.services.room_service import RoomRef, RoomService
from rooms.stores.django_store import DjangoRoomStore

STATUS_BY_CODE = {
    ErrorCode.INVALID_EVENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ROOM_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_QUERY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.ROOM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SLOT_UNAVAILABLE: status.HTTP_409_CONFLICT,
    ErrorCode.ROOM_NAME_TAKEN: status.HTTP_409_CONFLICT,
    ErrorCode.CONCURRENCY_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.PERSISTENCE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_room_service() -> RoomService:
    return RoomService(
        DjangoRoomStore(),
        precision=Precision(settings.ROOMS_EVENT_PRECISION),
        save_retries=settings.ROOMS_SAVE_RETRIES,
        timezone=ZoneInfo(settings.TIME_ZONE),
    )


def error_response(error: DomainError) -> Response:
    return Response(
        {"error": {"code": error.code.value, "message": error.message}},
        status=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


class RoomAPIView(APIView):
    """Base handler: authenticated access and domain error mapping."""

    permission_classes = [IsAuthenticated]

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, DomainError):
            return error_response(exc)
        return super().handle_exception(exc)

    @property
    def service(self) -> RoomService:
        if not hasattr(self, "_service"):
            self._service = get_room_service()
        return self._service

    def actor(self, request: Request) -> Actor:
        user = request.user
        return self.service.actor_for(
            str(user.pk), is_admin=user.is_staff or user.is_superuser
        )

    def room_ref(self, name: str | None = None, room_id: str | None = None) -> RoomRef:
        if room_id is not None:
            return RoomRef.by_id(room_id)
        return RoomRef.by_name(name)


class RoomListView(RoomAPIView):
    """Handler for GET/POST /api/rooms"""

    def get(self, request: Request) -> Response:
        rooms = self.service.list_rooms(self.actor(request))
        return Response(RoomSummarySerializer(rooms, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = CreateRoomSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room = self.service.create_room(
            self.actor(request),
            serializer.validated_data["name"],
            serializer.validated_data.get("description") or None,
        )
        return Response(RoomSerializer(room).data, status=status.HTTP_201_CREATED)


class RoomDetailView(RoomAPIView):
    """Handler for GET/DELETE /api/rooms/{name} and /api/rooms/id/{room_id}"""

    def get(self, request: Request, name: str | None = None, room_id: str | None = None) -> Response:
        room = self.service.get_room(self.actor(request), self.room_ref(name, room_id))
        return Response(RoomSerializer(room).data)

    def delete(self, request: Request, name: str | None = None, room_id: str | None = None) -> Response:
        self.service.delete_room(self.actor(request), self.room_ref(name, room_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class RoomEditorsView(RoomAPIView):
    """Handler for POST /api/rooms/{name}/editors"""

    def post(self, request: Request, name: str) -> Response:
        serializer = GrantEditorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.service.grant_editor(
            self.actor(request),
            self.room_ref(name),
            str(serializer.validated_data["user_id"].pk),
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class RoomEventsView(RoomAPIView):
    """Handler for /api/rooms/{name}/events and /api/rooms/id/{room_id}/events

    GET lists a window of events, POST books a slot, DELETE removes the
    event at the instant given by ``?at=``.
    """

    def get(self, request: Request, name: str | None = None, room_id: str | None = None) -> Response:
        query = EventRangeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        actor = self.actor(request)
        ref = self.room_ref(name, room_id)

        if "start" in params:
            events = self.service.get_event_range(actor, ref, params["start"], params["stop"])
        elif "since" in params:
            since = datetime.fromtimestamp(params["since"], UTC)
            events = self.service.get_events_from(actor, ref, since)
        else:
            events = self.service.get_events_for_day(
                actor, ref, day=params.get("day"), offset=params.get("offset", 0)
            )
        return Response(EventSerializer(events, many=True).data)

    def post(self, request: Request, name: str | None = None, room_id: str | None = None) -> Response:
        serializer = CreateEventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        event = self.service.add_event(
            self.actor(request),
            self.room_ref(name, room_id),
            data["headline"],
            data.get("description"),
            data["start"],
            data["stop"],
        )
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)

    def delete(self, request: Request, name: str | None = None, room_id: str | None = None) -> Response:
        serializer = RemoveEventSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        removed = self.service.remove_event(
            self.actor(request),
            self.room_ref(name, room_id),
            serializer.validated_data["at"],
        )
        return Response(EventSerializer(removed).data)
