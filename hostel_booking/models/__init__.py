"""Booking widget data models."""

from hostel_booking.models.campaign import CampaignWindow
from hostel_booking.models.cart import CartLineItem
from hostel_booking.models.offering import AccommodationOffering, Family, PricingModel
from hostel_booking.models.query import SearchQuery, parse_guest_count
from hostel_booking.models.reservation import ReservationItem, ReservationRequest
from hostel_booking.models.view import (
    AccommodationCard,
    AmenityEntry,
    BookingViewModel,
    CartLineView,
    FlowInputVariable,
    PicklistOption,
    RoomSection,
)

__all__ = [
    "AccommodationOffering",
    "Family",
    "PricingModel",
    "CartLineItem",
    "CampaignWindow",
    "SearchQuery",
    "parse_guest_count",
    "ReservationItem",
    "ReservationRequest",
    "AccommodationCard",
    "AmenityEntry",
    "BookingViewModel",
    "CartLineView",
    "FlowInputVariable",
    "PicklistOption",
    "RoomSection",
]
