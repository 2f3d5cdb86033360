"""API clients package."""

from hostel_booking.clients.booking_api_client import (
    BookingAPIAuthenticationError,
    BookingAPIClient,
    BookingAPIClientError,
    BookingAPINotFoundError,
    BookingAPIServerError,
)

__all__ = [
    "BookingAPIClient",
    "BookingAPIClientError",
    "BookingAPIAuthenticationError",
    "BookingAPINotFoundError",
    "BookingAPIServerError",
]
