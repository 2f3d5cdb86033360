"""Booking engine services."""

from hostel_booking.services.availability_session import AvailabilitySession, AvailabilityState
from hostel_booking.services.booking_submitter import BookingSubmitter, SubmissionStatus
from hostel_booking.services.booking_widget import HostelBookingWidget
from hostel_booking.services.cart_state import CartState, CartStateManager, reduce_cart
from hostel_booking.services.date_range_validator import DateRangeValidator
from hostel_booking.services.errors import (
    AvailabilityFetchError,
    BookingSubmissionError,
    BookingWidgetError,
    CampaignLookupError,
    DateRangeInvalid,
)
from hostel_booking.services.view_model import WidgetState, derive_view_model

__all__ = [
    "AvailabilitySession",
    "AvailabilityState",
    "BookingSubmitter",
    "SubmissionStatus",
    "HostelBookingWidget",
    "CartState",
    "CartStateManager",
    "reduce_cart",
    "DateRangeValidator",
    "AvailabilityFetchError",
    "BookingSubmissionError",
    "BookingWidgetError",
    "CampaignLookupError",
    "DateRangeInvalid",
    "WidgetState",
    "derive_view_model",
]
