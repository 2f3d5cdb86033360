"""Pydantic models for reservation creation requests."""

import json
from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class ReservationItem(BaseModel):
    """A single product/quantity pair sent to the reservation service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: str = Field(alias="productId")
    quantity: int


class ReservationRequest(BaseModel):
    """Reservation payload built from the cart and the current query.

    Denormalized cart fields (name, rate, pricing model) are never sent.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    check_in_date: date = Field(alias="checkInDate")
    check_out_date: date = Field(alias="checkOutDate")
    guests: int
    items: tuple[ReservationItem, ...] = ()
    campaign_type: str = Field(default="", alias="campaignType")

    def items_json(self) -> str:
        """Serialize items as the single text blob the service expects."""
        return json.dumps(
            [item.model_dump(by_alias=True) for item in self.items],
            separators=(",", ":"),
        )
