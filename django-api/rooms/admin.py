from django.contrib import admin

from rooms.models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ["name", "owner", "version", "updated_at"]
    search_fields = ["name", "description"]
    filter_horizontal = ["editors"]
    # Schedule and layouts are written by RoomService only.
    readonly_fields = [
        "events",
        "layouts",
        "layout_values",
        "version",
        "created_at",
        "updated_at",
    ]
