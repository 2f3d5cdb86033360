"""Configuration package."""

from hostel_booking.config.logging import configure_logging, get_logger
from hostel_booking.config.settings import Settings, settings

__all__ = ["settings", "Settings", "configure_logging", "get_logger"]
