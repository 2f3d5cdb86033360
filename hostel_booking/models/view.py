"""Pydantic models for the derived, read-only view of the booking widget.

Nothing here is stored; every instance is projected from raw state on read.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _ViewModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class PicklistOption(_ViewModel):
    """Label/value pair for a dropdown."""

    label: str
    value: str


class AmenityEntry(_ViewModel):
    key: int
    text: str


class AccommodationCard(_ViewModel):
    """An offering enriched with selection and display state."""

    product_id: str
    name: str
    family: str
    pricing_model: str
    rate: Optional[float] = None
    available_units: int = 0
    gender_restriction: Optional[str] = None
    max_guests: Optional[int] = None
    image_url: Optional[str] = None

    is_selected: bool = False
    is_expanded: bool = False
    rate_basis: str = ""
    avail_label: str = ""
    is_low_availability: bool = False
    amenities_list: tuple[AmenityEntry, ...] = ()
    has_amenities: bool = False
    has_image: bool = False
    formatted_rate: str = ""
    expand_label: str = ""


class RoomSection(_ViewModel):
    key: str
    label: str
    rooms: tuple[AccommodationCard, ...] = ()


class CartLineView(_ViewModel):
    """A cart line item enriched with pricing and labels."""

    product_id: str
    name: str
    rate: Optional[float] = None
    pricing_model: str
    quantity: int
    available_units: int

    line_total: float = 0.0
    formatted_total: str = ""
    qty_label: str = ""
    qty_field_label: str = ""
    qty_options: tuple[PicklistOption, ...] = ()
    quantity_str: str = ""
    date_range: str = ""
    night_count: str = ""
    remove_label: str = ""


class FlowInputVariable(_ViewModel):
    """Single named input handed to the post-booking workflow."""

    name: str
    type: str = "String"
    value: str


class BookingViewModel(_ViewModel):
    """Everything a renderer needs to draw the widget."""

    heading: str
    check_in_date: str
    check_out_date: str
    guest_count: str
    guest_options: tuple[PicklistOption, ...] = ()

    is_loading: bool = False
    is_booking: bool = False
    error: Optional[str] = None
    date_error: Optional[str] = None
    has_date_error: bool = False
    booking_success: Optional[str] = None

    room_sections: tuple[RoomSection, ...] = ()
    has_results: bool = False
    has_no_results: bool = False

    cart_items: tuple[CartLineView, ...] = ()
    has_cart_items: bool = False
    is_book_now_disabled: bool = True
    show_book_now_hint: bool = True
    formatted_cart_total: str = "$0.00"

    night_count: int = 1
    night_label: str = "NIGHT"
    date_range_label: str = ""
    date_picker_min: Optional[str] = None
    date_picker_max: Optional[str] = None
    formatted_date_ranges: str = ""

    is_showing_booking: bool = True
    show_flow: bool = False
    flow_api_name: Optional[str] = None
    flow_input_variables: tuple[FlowInputVariable, ...] = Field(default_factory=tuple)
