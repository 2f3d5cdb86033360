"""Search query model and guest count parsing."""

import re
from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_guest_count(value: Any) -> int:
    """Parse a picklist guest count leniently.

    Leading digits are honoured ("3 guests" -> 3). Anything unparseable,
    or below 1, falls back to 1.
    """
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return value if value >= 1 else 1
    match = _LEADING_INT_RE.match(str(value if value is not None else ""))
    if not match:
        return 1
    count = int(match.group(1))
    return count if count >= 1 else 1


class SearchQuery(BaseModel):
    """Current stay interval, guest count and campaign restriction."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    check_in_date: date = Field(alias="checkInDate")
    check_out_date: date = Field(alias="checkOutDate")
    guest_count: str = Field(default="1", alias="guestCount")  # Picklist value
    campaign_type: Optional[str] = Field(None, alias="campaignType")

    @property
    def guests(self) -> int:
        return parse_guest_count(self.guest_count)
