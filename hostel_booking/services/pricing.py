"""Pricing calculations over a stay interval and a cart.

Pure functions; nothing here touches state.
"""

from datetime import date
from typing import Iterable, Optional, Sequence

from hostel_booking.models.cart import CartLineItem
from hostel_booking.models.offering import AccommodationOffering


def night_count(check_in: Optional[date], check_out: Optional[date]) -> int:
    """Number of nights in the stay, never less than 1."""
    if check_in is None or check_out is None:
        return 1
    nights = round((check_out - check_in).days)
    return nights if nights > 0 else 1


def line_total(item: CartLineItem, nights: int) -> float:
    """rate x quantity x nights. A missing rate prices as zero."""
    return (item.rate or 0.0) * item.quantity * nights


def cart_total_amount(items: Iterable[CartLineItem], nights: int) -> float:
    return sum((line_total(item, nights) for item in items), 0.0)


def format_currency(amount: float) -> str:
    return f"${amount:.2f}"


def cart_total(items: Iterable[CartLineItem], nights: int) -> str:
    """Sum of line totals, formatted as ``$1234.50``."""
    return format_currency(cart_total_amount(items, nights))


def max_selectable_quantity(
    item: CartLineItem, offerings: Sequence[AccommodationOffering]
) -> int:
    """Available units of the matching offering, or 1 when it is gone.

    Advisory only: it bounds the quantity picklist, it is not enforced.
    """
    for offering in offerings:
        if offering.product_id == item.product_id:
            return offering.available_units
    return 1
