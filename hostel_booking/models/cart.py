"""Pydantic model for a cart line item."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hostel_booking.models.offering import AccommodationOffering, PricingModel


class CartLineItem(BaseModel):
    """A user's chosen quantity of one offering.

    Name, rate, pricing model and available units are snapshotted from the
    offering when the line item is created and are not refreshed afterwards.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: str = Field(alias="productId")
    name: str = ""
    rate: Optional[float] = None
    pricing_model: str = Field(default=PricingModel.PER_ROOM.value, alias="pricingModel")
    quantity: int = 1
    available_units: int = Field(default=0, alias="availableUnits")

    @property
    def is_per_person(self) -> bool:
        return self.pricing_model == PricingModel.PER_PERSON.value

    @classmethod
    def from_offering(cls, offering: AccommodationOffering, quantity: int) -> "CartLineItem":
        """Snapshot an offering into a new line item."""
        return cls(
            product_id=offering.product_id,
            name=offering.name,
            rate=offering.rate,
            pricing_model=offering.pricing_model,
            quantity=quantity,
            available_units=offering.available_units,
        )
