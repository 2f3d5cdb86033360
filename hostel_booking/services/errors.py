"""Error taxonomy of the booking engine.

Every error is recovered inside the component that raises it: the user-facing
message is recorded in state and the previously valid state is kept.
"""

from typing import Optional

GENERIC_AVAILABILITY_ERROR = "An error occurred"
GENERIC_BOOKING_ERROR = "Booking failed. Please try again."
DATE_RANGE_ERROR_PREFIX = "Selected dates are outside the available booking periods: "


class BookingWidgetError(Exception):
    """Base class for recoverable booking engine failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AvailabilityFetchError(BookingWidgetError):
    """The inventory lookup failed."""

    pass


class CampaignLookupError(BookingWidgetError):
    """The campaign date-window lookup failed. Never shown to the user."""

    pass


class DateRangeInvalid(BookingWidgetError):
    """The requested stay does not fit a single campaign window."""

    pass


class BookingSubmissionError(BookingWidgetError):
    """Reservation creation failed."""

    pass


def error_message_from(exc: BaseException, fallback: str) -> str:
    """Derive a user-facing message from a failure payload.

    Uses the ``message`` field of the error body when the failure carries a
    structured payload, else the fallback.
    """
    body: Optional[dict] = getattr(exc, "body", None)
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return fallback
