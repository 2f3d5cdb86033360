"""Availability session: current query parameters and the inventory snapshot."""

from datetime import date
from typing import Callable, Optional, Protocol

from pydantic import BaseModel, ConfigDict
from structlog import get_logger

from hostel_booking.models.offering import AccommodationOffering
from hostel_booking.models.query import SearchQuery
from hostel_booking.services.cart_state import CartStateManager
from hostel_booking.services.errors import (
    GENERIC_AVAILABILITY_ERROR,
    AvailabilityFetchError,
    error_message_from,
)

logger = get_logger(__name__)


class AvailabilitySource(Protocol):
    async def get_available_accommodations(
        self,
        check_in_date: date,
        check_out_date: date,
        guests: int,
        campaign_type: str = "",
    ) -> list[dict]: ...


class AvailabilityState(BaseModel):
    """Immutable availability snapshot."""

    model_config = ConfigDict(frozen=True)

    query: SearchQuery
    offerings: tuple[AccommodationOffering, ...] = ()
    error: Optional[str] = None
    is_loading: bool = False


class AvailabilitySession:
    """Queries the availability lookup and keeps the cart reconciled.

    Requests are neither serialized nor cancelled. With two queries in flight,
    whichever response arrives last overwrites the snapshot ("last response
    wins"), regardless of issue order. Setting ``discard_stale_responses``
    tags each request with a generation number and ignores any response that
    is not from the most recent request.
    """

    def __init__(
        self,
        source: AvailabilitySource,
        cart: CartStateManager,
        query: SearchQuery,
        discard_stale_responses: bool = False,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self._source = source
        self._cart = cart
        self._on_change = on_change
        self.discard_stale_responses = discard_stale_responses
        self.state = AvailabilityState(query=query)
        self._generation = 0

    @property
    def query(self) -> SearchQuery:
        return self.state.query

    @property
    def offerings(self) -> tuple[AccommodationOffering, ...]:
        return self.state.offerings

    def update_query(self, **changes) -> SearchQuery:
        """Replace query fields without issuing a lookup."""
        self.state = self.state.model_copy(
            update={"query": self.state.query.model_copy(update=changes)}
        )
        return self.state.query

    async def _lookup(self, query: SearchQuery) -> tuple[AccommodationOffering, ...]:
        try:
            raw_offerings = await self._source.get_available_accommodations(
                check_in_date=query.check_in_date,
                check_out_date=query.check_out_date,
                guests=query.guests,
                campaign_type=query.campaign_type or "",
            )
            return tuple(
                AccommodationOffering.model_validate(raw) for raw in raw_offerings or []
            )
        except Exception as e:
            raise AvailabilityFetchError(
                error_message_from(e, GENERIC_AVAILABILITY_ERROR)
            ) from e

    async def query_availability(self) -> AvailabilityState:
        """Fetch inventory for the current query.

        Always completes: success replaces the snapshot and reconciles the cart,
        failure clears the snapshot and records a message. The cart is only
        pruned against a successful result. Completion clears ``is_loading``.
        """
        self._generation += 1
        generation = self._generation
        query = self.state.query
        self.state = self.state.model_copy(update={"is_loading": True})
        self._notify()

        try:
            offerings = await self._lookup(query)
        except AvailabilityFetchError as e:
            if self._is_stale(generation):
                return self.state
            logger.warning(
                "Availability lookup failed",
                check_in_date=query.check_in_date.isoformat(),
                check_out_date=query.check_out_date.isoformat(),
                error=e.message,
            )
            self.state = self.state.model_copy(
                update={"offerings": (), "error": e.message, "is_loading": False}
            )
            self._notify()
            return self.state

        if self._is_stale(generation):
            return self.state

        self.state = self.state.model_copy(
            update={"offerings": offerings, "error": None, "is_loading": False}
        )
        logger.info(
            "Availability refreshed",
            check_in_date=query.check_in_date.isoformat(),
            check_out_date=query.check_out_date.isoformat(),
            guests=query.guests,
            offering_count=len(offerings),
        )
        self._cart.reconcile(offerings)
        self._notify()
        return self.state

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _is_stale(self, generation: int) -> bool:
        if self.discard_stale_responses and generation != self._generation:
            logger.debug(
                "Discarding stale availability response",
                generation=generation,
                latest_generation=self._generation,
            )
            return True
        return False

    def clear_error(self) -> None:
        self.state = self.state.model_copy(update={"error": None})

    def set_error(self, message: Optional[str]) -> None:
        self.state = self.state.model_copy(update={"error": message})
