"""Pydantic model for campaign booking windows."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class CampaignWindow(BaseModel):
    """A date range during which booking is permitted (inclusive on both ends)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")

    def contains_stay(self, check_in: date, check_out: date) -> bool:
        """True when the whole stay sits inside this window."""
        return check_in >= self.start_date and check_out <= self.end_date
