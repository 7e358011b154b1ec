"""Error taxonomy for the booking engine.

Subclasses of ``BookingError`` carry a human-readable message that is safe to
return to callers. The API layer maps each kind to an HTTP status code.
"""


class BookingError(Exception):
    """Base class for user-facing booking failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInputError(BookingError):
    """Raised when a request is malformed or outside booking policy."""


class NotFoundError(BookingError):
    """Raised when a resource is missing or not owned by the caller."""


class ConflictError(BookingError):
    """Raised when a slot is already booked for the staff member."""


class ProvisioningFailedError(BookingError):
    """Raised when the meeting provider fails unexpectedly."""


class DependencyUnavailableError(BookingError):
    """Raised when an external provider is not configured."""


class DuplicateSlotError(Exception):
    """Raised by repositories when the slot uniqueness constraint is violated."""
