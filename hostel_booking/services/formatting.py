"""Short date formatting shared by validation messages and the view model."""

from datetime import date
from typing import Iterable, Optional

from hostel_booking.models.campaign import CampaignWindow

DAY_NAMES = ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"]
MONTH_NAMES = ["JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"]


def format_short_date(value: Optional[date]) -> str:
    """Render a date as ``SUN JUN 2``; empty string for no date."""
    if value is None:
        return ""
    return f"{DAY_NAMES[value.weekday()]} {MONTH_NAMES[value.month - 1]} {value.day}"


def pluralize(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def format_windows(windows: Iterable[CampaignWindow]) -> str:
    """Render windows as ``MON JUN 3 – MON JUN 10, ...``."""
    return ", ".join(
        f"{format_short_date(window.start_date)} – {format_short_date(window.end_date)}"
        for window in windows
    )
