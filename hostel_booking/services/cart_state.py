"""Cart state, actions and the reducer that applies them."""

from typing import Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict
from structlog import get_logger

from hostel_booking.models.cart import CartLineItem
from hostel_booking.models.offering import AccommodationOffering
from hostel_booking.models.query import parse_guest_count

logger = get_logger(__name__)


class CartState(BaseModel):
    """Immutable cart snapshot: selected line items and expanded cards."""

    model_config = ConfigDict(frozen=True)

    items: tuple[CartLineItem, ...] = ()
    expanded_ids: frozenset[str] = frozenset()

    def find(self, product_id: str) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.product_id == product_id), None)

    @property
    def is_empty(self) -> bool:
        return not self.items


class _CartAction(BaseModel):
    model_config = ConfigDict(frozen=True)


class Select(_CartAction):
    """Add a line item for an offering (no-op when it is already in the cart)."""

    product_id: str
    offerings: tuple[AccommodationOffering, ...] = ()
    guest_count: Union[int, str] = 1


class Deselect(_CartAction):
    product_id: str


class ChangeQuantity(_CartAction):
    product_id: str
    quantity: int


class Remove(_CartAction):
    product_id: str


class Reconcile(_CartAction):
    """Drop line items whose offering is absent from the latest inventory."""

    offerings: tuple[AccommodationOffering, ...] = ()


class Clear(_CartAction):
    pass


class ToggleExpand(_CartAction):
    product_id: str


CartAction = Union[Select, Deselect, ChangeQuantity, Remove, Reconcile, Clear, ToggleExpand]


def _without(items: tuple[CartLineItem, ...], product_id: str) -> tuple[CartLineItem, ...]:
    return tuple(item for item in items if item.product_id != product_id)


def _initial_quantity(offering: AccommodationOffering, guest_count: Union[int, str]) -> int:
    if offering.is_per_person:
        return min(parse_guest_count(guest_count), offering.available_units)
    return 1


def reduce_cart(state: CartState, action: CartAction) -> CartState:
    """Apply one action to a cart snapshot and return the next snapshot.

    Pure: the input snapshot is never modified.
    """
    if isinstance(action, Select):
        if state.find(action.product_id) is not None:
            return state
        offering = next(
            (o for o in action.offerings if o.product_id == action.product_id), None
        )
        if offering is None:
            return state
        item = CartLineItem.from_offering(
            offering, _initial_quantity(offering, action.guest_count)
        )
        return state.model_copy(update={"items": state.items + (item,)})

    if isinstance(action, (Deselect, Remove)):
        return state.model_copy(update={"items": _without(state.items, action.product_id)})

    if isinstance(action, ChangeQuantity):
        # Taken verbatim: not re-clamped against current availability.
        items = tuple(
            item.model_copy(update={"quantity": action.quantity})
            if item.product_id == action.product_id
            else item
            for item in state.items
        )
        return state.model_copy(update={"items": items})

    if isinstance(action, Reconcile):
        present = {offering.product_id for offering in action.offerings}
        kept = tuple(item for item in state.items if item.product_id in present)
        if len(kept) == len(state.items):
            return state
        return state.model_copy(update={"items": kept})

    if isinstance(action, Clear):
        return state.model_copy(update={"items": ()})

    if isinstance(action, ToggleExpand):
        if action.product_id in state.expanded_ids:
            expanded = state.expanded_ids - {action.product_id}
        else:
            expanded = state.expanded_ids | {action.product_id}
        return state.model_copy(update={"expanded_ids": frozenset(expanded)})

    raise TypeError(f"Unknown cart action: {type(action).__name__}")


class CartStateManager:
    """Owns the cart snapshot and routes every mutation through reduce_cart."""

    def __init__(self, state: Optional[CartState] = None):
        self.state = state or CartState()

    @property
    def items(self) -> tuple[CartLineItem, ...]:
        return self.state.items

    def dispatch(self, action: CartAction) -> CartState:
        previous = self.state
        self.state = reduce_cart(previous, action)
        if self.state is not previous:
            logger.debug(
                "Cart updated",
                action=type(action).__name__,
                item_count=len(self.state.items),
            )
        return self.state

    def reconcile(self, offerings: Sequence[AccommodationOffering]) -> CartState:
        before = len(self.state.items)
        self.dispatch(Reconcile(offerings=tuple(offerings)))
        pruned = before - len(self.state.items)
        if pruned:
            logger.info("Pruned cart items missing from inventory", pruned_count=pruned)
        return self.state

    def toggle_select(
        self,
        product_id: str,
        offerings: Sequence[AccommodationOffering],
        guest_count: Union[int, str],
    ) -> CartState:
        """Deselect when present, otherwise select from the given offerings."""
        if self.state.find(product_id) is not None:
            return self.dispatch(Deselect(product_id=product_id))
        return self.dispatch(
            Select(product_id=product_id, offerings=tuple(offerings), guest_count=guest_count)
        )

    def change_quantity(self, product_id: str, quantity: int) -> CartState:
        return self.dispatch(ChangeQuantity(product_id=product_id, quantity=quantity))

    def remove_item(self, product_id: str) -> CartState:
        return self.dispatch(Remove(product_id=product_id))

    def clear(self) -> CartState:
        return self.dispatch(Clear())

    def toggle_expand(self, product_id: str) -> CartState:
        return self.dispatch(ToggleExpand(product_id=product_id))
