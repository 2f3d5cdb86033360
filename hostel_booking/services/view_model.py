"""Pure projection from a widget state snapshot to the view model.

Derived fields are recomputed on every call and never cached on entities.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from hostel_booking.models.campaign import CampaignWindow
from hostel_booking.models.cart import CartLineItem
from hostel_booking.models.offering import AccommodationOffering
from hostel_booking.models.query import SearchQuery
from hostel_booking.models.view import (
    AccommodationCard,
    AmenityEntry,
    BookingViewModel,
    CartLineView,
    FlowInputVariable,
    PicklistOption,
    RoomSection,
)
from hostel_booking.services import pricing
from hostel_booking.services.cart_state import CartState
from hostel_booking.services.formatting import format_short_date, format_windows, pluralize

LOW_AVAILABILITY_THRESHOLD = 2


class WidgetState(BaseModel):
    """Immutable snapshot of everything the widget knows at one instant."""

    model_config = ConfigDict(frozen=True)

    heading: str = "Book Your Stay"
    max_guest_options: int = 10
    query: SearchQuery
    offerings: tuple[AccommodationOffering, ...] = ()
    cart: CartState = CartState()
    windows: tuple[CampaignWindow, ...] = ()
    is_loading: bool = False
    is_booking: bool = False
    error: Optional[str] = None
    date_error: Optional[str] = None
    booking_success: Optional[str] = None
    show_flow: bool = False
    flow_api_name: Optional[str] = None
    flow_input_variables: tuple[FlowInputVariable, ...] = ()


def number_options(count: int) -> tuple[PicklistOption, ...]:
    return tuple(PicklistOption(label=str(i), value=str(i)) for i in range(1, count + 1))


def enrich_offering(
    offering: AccommodationOffering, cart: CartState
) -> AccommodationCard:
    is_expanded = offering.product_id in cart.expanded_ids
    amenities = [
        AmenityEntry(key=index, text=text)
        for index, text in enumerate(
            line for line in (offering.amenities or "").split("\n") if line
        )
    ]
    return AccommodationCard(
        product_id=offering.product_id,
        name=offering.name,
        family=offering.family,
        pricing_model=offering.pricing_model,
        rate=offering.rate,
        available_units=offering.available_units,
        gender_restriction=offering.gender_restriction,
        max_guests=offering.max_guests,
        image_url=offering.image_url,
        is_selected=cart.find(offering.product_id) is not None,
        is_expanded=is_expanded,
        rate_basis="/ person / night" if offering.is_per_person else "/ room / night",
        avail_label=f"{offering.available_units} LEFT!",
        is_low_availability=offering.available_units <= LOW_AVAILABILITY_THRESHOLD,
        amenities_list=tuple(amenities),
        has_amenities=bool(amenities),
        has_image=bool(offering.image_url),
        formatted_rate=pricing.format_currency(offering.rate) if offering.rate is not None else "",
        expand_label=f"{'Collapse' if is_expanded else 'Expand'} {offering.name}",
    )


def room_sections(state: WidgetState) -> tuple[RoomSection, ...]:
    sections = []
    dorms = tuple(enrich_offering(o, state.cart) for o in state.offerings if o.is_dorm)
    if dorms:
        sections.append(RoomSection(key="dorm", label="Dorm Rooms", rooms=dorms))
    privates = tuple(enrich_offering(o, state.cart) for o in state.offerings if o.is_private)
    if privates:
        sections.append(RoomSection(key="private", label="Private Rooms", rooms=privates))
    return tuple(sections)


def night_label(nights: int) -> str:
    return "NIGHT" if nights == 1 else "NIGHTS"


def date_range_label(query: SearchQuery) -> str:
    return f"{format_short_date(query.check_in_date)} - {format_short_date(query.check_out_date)}"


def enrich_cart_item(item: CartLineItem, state: WidgetState) -> CartLineView:
    nights = pricing.night_count(state.query.check_in_date, state.query.check_out_date)
    total = pricing.line_total(item, nights)
    if item.is_per_person:
        unit_label = pluralize(item.quantity, "person", "persons")
        field_label = "No. of guests"
    else:
        unit_label = pluralize(item.quantity, "room", "rooms")
        field_label = "No. of rooms"
    max_quantity = pricing.max_selectable_quantity(item, state.offerings)

    return CartLineView(
        product_id=item.product_id,
        name=item.name,
        rate=item.rate,
        pricing_model=item.pricing_model,
        quantity=item.quantity,
        available_units=item.available_units,
        line_total=total,
        formatted_total=pricing.format_currency(total),
        qty_label=f"{unit_label} for {pluralize(nights, 'night', 'nights')}",
        qty_field_label=field_label,
        qty_options=number_options(max_quantity),
        quantity_str=str(item.quantity),
        date_range=date_range_label(state.query),
        night_count=f"{nights} {night_label(nights)}",
        remove_label=f"Remove {item.name}",
    )


def derive_view_model(state: WidgetState) -> BookingViewModel:
    """Project a state snapshot into everything a renderer needs."""
    query = state.query
    nights = pricing.night_count(query.check_in_date, query.check_out_date)
    has_cart_items = not state.cart.is_empty
    windows = state.windows

    return BookingViewModel(
        heading=state.heading,
        check_in_date=query.check_in_date.isoformat(),
        check_out_date=query.check_out_date.isoformat(),
        guest_count=query.guest_count,
        guest_options=number_options(state.max_guest_options),
        is_loading=state.is_loading,
        is_booking=state.is_booking,
        error=state.error,
        date_error=state.date_error,
        has_date_error=bool(state.date_error),
        booking_success=state.booking_success,
        room_sections=room_sections(state),
        has_results=bool(state.offerings),
        has_no_results=not state.is_loading and not state.offerings and not state.error,
        cart_items=tuple(enrich_cart_item(item, state) for item in state.cart.items),
        has_cart_items=has_cart_items,
        is_book_now_disabled=not has_cart_items or state.is_booking or bool(state.date_error),
        show_book_now_hint=not has_cart_items,
        formatted_cart_total=pricing.cart_total(state.cart.items, nights),
        night_count=nights,
        night_label=night_label(nights),
        date_range_label=date_range_label(query),
        date_picker_min=windows[0].start_date.isoformat() if windows else None,
        date_picker_max=windows[-1].end_date.isoformat() if windows else None,
        formatted_date_ranges=format_windows(windows),
        is_showing_booking=not state.show_flow,
        show_flow=state.show_flow,
        flow_api_name=state.flow_api_name,
        flow_input_variables=state.flow_input_variables,
    )
