from django.urls import path

from rooms.handlers import RoomDetailView, RoomEditorsView, RoomEventsView, RoomListView

urlpatterns = [
    path("rooms", RoomListView.as_view(), name="room-list"),
    path("rooms/id/<str:room_id>", RoomDetailView.as_view(), name="room-detail-by-id"),
    path(
        "rooms/id/<str:room_id>/events",
        RoomEventsView.as_view(),
        name="room-events-by-id",
    ),
    path("rooms/<str:name>", RoomDetailView.as_view(), name="room-detail"),
    path("rooms/<str:name>/events", RoomEventsView.as_view(), name="room-events"),
    path("rooms/<str:name>/editors", RoomEditorsView.as_view(), name="room-editors"),
]
