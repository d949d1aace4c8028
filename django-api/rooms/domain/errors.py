"""Domain error codes for the rooms module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_ROOM_ID = "INVALID_ROOM_ID"
    INVALID_EVENT = "INVALID_EVENT"
    INVALID_QUERY = "INVALID_QUERY"
    SLOT_UNAVAILABLE = "SLOT_UNAVAILABLE"
    ROOM_NAME_TAKEN = "ROOM_NAME_TAKEN"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    CONCURRENCY_CONFLICT = "CONCURRENCY_CONFLICT"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class RoomNotFoundError(DomainError):
    """Raised when a room is not found."""

    def __init__(self, room_ref: str) -> None:
        super().__init__(
            code=ErrorCode.ROOM_NOT_FOUND,
            message="Room not found",
        )
        self.room_ref = room_ref


class EventNotFoundError(DomainError):
    """Raised when no reservation covers the requested instant."""

    def __init__(self, room_ref: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="No event at the given time",
        )
        self.room_ref = room_ref


class InvalidRoomIdError(DomainError):
    """Raised when a room ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ROOM_ID,
            message="Invalid room ID format",
        )


class InvalidEventError(DomainError):
    """Raised when event fields fail validation."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT,
            message="Event could not be created",
        )


class InvalidQueryError(DomainError):
    """Raised when a range query window is malformed."""

    def __init__(self, message: str = "Invalid time range") -> None:
        super().__init__(code=ErrorCode.INVALID_QUERY, message=message)


class SlotUnavailableError(DomainError):
    """Raised when the requested time slot is already taken."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SLOT_UNAVAILABLE,
            message="Slot unavailable",
        )


class RoomNameTakenError(DomainError):
    """Raised when creating a room whose name is already in use."""

    def __init__(self, name: str) -> None:
        super().__init__(
            code=ErrorCode.ROOM_NAME_TAKEN,
            message="A room with this name already exists",
        )
        self.name = name


class PermissionDeniedError(DomainError):
    """Raised when the acting user may not perform an operation."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PERMISSION_DENIED,
            message="You are not allowed to perform this action",
        )


class ConcurrencyConflictError(DomainError):
    """Raised when a room kept changing underneath a write."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CONCURRENCY_CONFLICT,
            message="Room was modified concurrently, retry the request",
        )


class PersistenceError(DomainError):
    """Raised when the store fails to load or save a room."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PERSISTENCE_FAILURE,
            message="Storage unavailable",
        )


class ProbeInsertError(RuntimeError):
    """Raised when a lookup probe is handed to an insert.

    Probes only exist to search the store by instant; storing one is a bug
    in the caller, so this is not a DomainError.
    """
