"""Pydantic models for accommodation offerings returned by the availability lookup."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Family(str, Enum):
    """Accommodation family as reported by the availability service."""

    DORM = "Dorm Bed"
    PRIVATE = "Private Room"


class PricingModel(str, Enum):
    """How an offering's rate is applied."""

    PER_PERSON = "Per Person"
    PER_ROOM = "Per Room"


class AccommodationOffering(BaseModel):
    """One purchasable unit type (room or dorm bed category).

    The whole offering set is replaced on every successful availability query,
    so instances are immutable.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    product_id: str = Field(alias="productId")
    name: str = ""
    family: str = Field(default="", description="'Dorm Bed' or 'Private Room'")
    pricing_model: str = Field(
        default=PricingModel.PER_ROOM.value,
        alias="pricingModel",
        description="'Per Person' or 'Per Room'",
    )
    rate: Optional[float] = Field(None, description="Currency per unit per night")
    available_units: int = Field(default=0, alias="availableUnits")
    amenities: Optional[str] = None  # Newline separated
    gender_restriction: Optional[str] = Field(None, alias="genderRestriction")
    max_guests: Optional[int] = Field(None, alias="maxGuests")
    image_url: Optional[str] = Field(None, alias="imageUrl")

    @property
    def is_per_person(self) -> bool:
        return self.pricing_model == PricingModel.PER_PERSON.value

    @property
    def is_dorm(self) -> bool:
        return self.family == Family.DORM.value

    @property
    def is_private(self) -> bool:
        return self.family == Family.PRIVATE.value
