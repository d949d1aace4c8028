"""Serializers for request parsing and for rendering domain models."""

from django.contrib.auth import get_user_model
from rest_framework import serializers


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.CharField(read_only=True)
    booker_id = serializers.CharField(read_only=True)
    headline = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True, allow_null=True)
    start = serializers.DateTimeField(read_only=True)
    stop = serializers.DateTimeField(read_only=True)


class RoomSummarySerializer(serializers.Serializer):
    """Serializer for Room domain model without its schedule."""

    id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True, allow_null=True)
    owner = serializers.CharField(read_only=True, allow_null=True)


class RoomSerializer(RoomSummarySerializer):
    """Serializer for Room domain model including its events."""

    events = EventSerializer(many=True, read_only=True)
    layouts = serializers.ListField(child=serializers.CharField(), read_only=True)
    layout_values = serializers.DictField(child=serializers.CharField(), read_only=True)
    version = serializers.IntegerField(read_only=True)


class CreateRoomSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_name(self, value):
        # Room names are URL path segments, and "id" prefixes the by-id routes.
        if "/" in value:
            raise serializers.ValidationError("Room name must not contain '/'")
        if value == "id":
            raise serializers.ValidationError("'id' is a reserved room name")
        return value


class GrantEditorSerializer(serializers.Serializer):
    user_id = serializers.PrimaryKeyRelatedField(queryset=get_user_model().objects.all())


class CreateEventSerializer(serializers.Serializer):
    """Input for booking a slot; bounds are RFC 3339 timestamps."""

    headline = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    start = serializers.DateTimeField()
    stop = serializers.DateTimeField()


class RemoveEventSerializer(serializers.Serializer):
    at = serializers.DateTimeField()


class EventRangeQuerySerializer(serializers.Serializer):
    """Query parameters selecting a window of events.

    Exactly one selector may be given: ``start`` with ``stop``, ``day``,
    ``since`` (unix seconds), or ``offset`` in days from today. With none of
    them the current day is returned.
    """

    start = serializers.DateTimeField(required=False)
    stop = serializers.DateTimeField(required=False)
    day = serializers.DateField(required=False)
    since = serializers.IntegerField(
        required=False, min_value=0, max_value=253402214399
    )
    offset = serializers.IntegerField(required=False, min_value=-3650, max_value=3650)

    def validate(self, attrs):
        if ("start" in attrs) != ("stop" in attrs):
            raise serializers.ValidationError("start and stop must be given together")
        selectors = [key for key in ("start", "day", "since", "offset") if key in attrs]
        if len(selectors) > 1:
            raise serializers.ValidationError(
                f"Conflicting selectors: {', '.join(selectors)}"
            )
        return attrs
