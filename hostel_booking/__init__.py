"""Booking cart and availability reconciliation engine for a room/bed booking widget."""

__version__ = "1.0.0"
