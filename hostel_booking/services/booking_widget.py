"""Booking widget facade: wires validator, session, cart and submitter together."""

from datetime import date, timedelta
from typing import Any, Callable, Optional, Union

from structlog import get_logger

from hostel_booking.clients import BookingAPIClient
from hostel_booking.config import settings
from hostel_booking.models.query import SearchQuery
from hostel_booking.models.view import BookingViewModel
from hostel_booking.services.availability_session import AvailabilitySession
from hostel_booking.services.booking_submitter import BookingSubmitter, SubmissionStatus
from hostel_booking.services.cart_state import CartStateManager
from hostel_booking.services.date_range_validator import DateRangeValidator
from hostel_booking.services.view_model import WidgetState, derive_view_model

logger = get_logger(__name__)

DateInput = Union[date, str]


def _to_date(value: DateInput) -> Optional[date]:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


class HostelBookingWidget:
    """Client-side booking widget core.

    Every user action mutates component state, which yields a new immutable
    ``WidgetState`` snapshot, and triggers exactly one ``on_render`` call with
    the projected view model. Campaign awareness is switched on by the
    presence of a campaign type.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        heading: Optional[str] = None,
        flow_api_name: Optional[str] = None,
        campaign_type: Optional[str] = None,
        on_render: Optional[Callable[[BookingViewModel], None]] = None,
        today: Optional[date] = None,
    ):
        """Initialize the widget from explicit values, falling back to settings.

        Args:
            client: Object providing the three remote operations
                (defaults to BookingAPIClient)
            heading: Display heading
            flow_api_name: Post-booking workflow; enables the recordId hand-off
            campaign_type: Campaign restriction; enables date-window mode
            on_render: Called with the view model after every state change
            today: Date used for the default stay (defaults to date.today())
        """
        self.client = client or BookingAPIClient()
        self.heading = heading or settings.widget.heading
        self.flow_api_name = (flow_api_name or settings.flow_api_name or "").strip() or None
        self.campaign_type = (campaign_type or settings.campaign_type or "").strip() or None
        self.campaign_aware = self.campaign_type is not None
        self.on_render = on_render
        self.date_error: Optional[str] = None

        check_in = today or date.today()
        self.cart = CartStateManager()
        self.validator = DateRangeValidator(self.client, campaign_aware=self.campaign_aware)
        self.availability = AvailabilitySession(
            self.client,
            self.cart,
            SearchQuery(
                check_in_date=check_in,
                check_out_date=check_in + timedelta(days=1),
                guest_count="1",
                campaign_type=self.campaign_type,
            ),
            discard_stale_responses=settings.widget.discard_stale_responses,
            on_change=self._render,
        )
        self.submitter = BookingSubmitter(
            self.client,
            self.cart,
            self.availability,
            flow_api_name=self.flow_api_name,
            submit_timeout_seconds=settings.widget.submit_timeout_seconds,
            on_change=self._render,
        )
        self.logger = logger.bind(campaign_type=self.campaign_type)

    # --- State ---

    def snapshot(self) -> WidgetState:
        availability = self.availability.state
        return WidgetState(
            heading=self.heading,
            max_guest_options=settings.widget.max_guest_options,
            query=availability.query,
            offerings=availability.offerings,
            cart=self.cart.state,
            windows=self.validator.windows,
            is_loading=availability.is_loading,
            is_booking=self.submitter.status is SubmissionStatus.SUBMITTING,
            error=availability.error,
            date_error=self.date_error,
            booking_success=self.submitter.success_message,
            show_flow=self.submitter.show_flow,
            flow_api_name=self.flow_api_name,
            flow_input_variables=self.submitter.flow_input_variables,
        )

    def view_model(self) -> BookingViewModel:
        return derive_view_model(self.snapshot())

    def _render(self) -> None:
        if self.on_render is not None:
            self.on_render(self.view_model())

    # --- Lifecycle ---

    async def start(self) -> BookingViewModel:
        """Load campaign windows when campaign aware, then query availability."""
        self.logger.info("Booking widget starting", campaign_aware=self.campaign_aware)
        if self.campaign_aware:
            await self.validator.load(self.campaign_type)
            query = self.availability.query
            check_in, check_out = self.validator.constrain_initial(
                query.check_in_date, query.check_out_date
            )
            self.availability.update_query(check_in_date=check_in, check_out_date=check_out)
            self.date_error = None
            self._render()
        await self.availability.query_availability()
        return self.view_model()

    # --- Search handlers ---

    async def _validate_and_query(self) -> None:
        query = self.availability.query
        self.date_error = self.validator.validate(query.check_in_date, query.check_out_date)
        self._render()
        if self.date_error is None:
            await self.availability.query_availability()

    async def change_check_in(self, value: DateInput) -> BookingViewModel:
        """Set check-in; push check-out to the next day if it is no longer after it."""
        check_in = _to_date(value)
        if check_in is None:
            self.logger.warning("Ignoring unparseable check-in date", value=str(value))
            return self.view_model()

        changes: dict[str, date] = {"check_in_date": check_in}
        if self.availability.query.check_out_date <= check_in:
            changes["check_out_date"] = check_in + timedelta(days=1)
        self.availability.update_query(**changes)
        await self._validate_and_query()
        return self.view_model()

    async def change_check_out(self, value: DateInput) -> BookingViewModel:
        check_out = _to_date(value)
        if check_out is None:
            self.logger.warning("Ignoring unparseable check-out date", value=str(value))
            return self.view_model()

        self.availability.update_query(check_out_date=check_out)
        await self._validate_and_query()
        return self.view_model()

    async def change_guests(self, value: Union[int, str]) -> BookingViewModel:
        """Set the guest picklist value and re-query (no date validation)."""
        self.availability.update_query(guest_count=str(value))
        self._render()
        await self.availability.query_availability()
        return self.view_model()

    # --- Cart handlers ---

    def toggle_select(self, product_id: str) -> BookingViewModel:
        query = self.availability.query
        self.cart.toggle_select(product_id, self.availability.offerings, query.guest_count)
        self._render()
        return self.view_model()

    def toggle_expand(self, product_id: str) -> BookingViewModel:
        self.cart.toggle_expand(product_id)
        self._render()
        return self.view_model()

    def change_quantity(self, product_id: str, value: Union[int, str]) -> BookingViewModel:
        """Set a line item's quantity from the picklist value, as given."""
        try:
            quantity = int(value)
        except (TypeError, ValueError):
            self.logger.warning(
                "Ignoring unparseable quantity", product_id=product_id, value=str(value)
            )
            return self.view_model()
        self.cart.change_quantity(product_id, quantity)
        self._render()
        return self.view_model()

    def remove_item(self, product_id: str) -> BookingViewModel:
        self.cart.remove_item(product_id)
        self._render()
        return self.view_model()

    # --- Booking ---

    async def book_now(self) -> BookingViewModel:
        await self.submitter.submit()
        return self.view_model()

    def handle_flow_status(self, status: str) -> BookingViewModel:
        if self.submitter.handle_flow_status(status):
            self._render()
        return self.view_model()
