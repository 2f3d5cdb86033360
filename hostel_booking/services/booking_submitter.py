"""Booking submission: reservation request, submission state machine and hand-off."""

import asyncio
from datetime import date
from enum import Enum
from typing import Callable, Optional, Protocol

from structlog import get_logger

from hostel_booking.models.reservation import ReservationItem, ReservationRequest
from hostel_booking.models.view import FlowInputVariable
from hostel_booking.services.availability_session import AvailabilitySession
from hostel_booking.services.cart_state import CartStateManager
from hostel_booking.services.errors import (
    GENERIC_BOOKING_ERROR,
    BookingSubmissionError,
    error_message_from,
)

logger = get_logger(__name__)

FLOW_RECORD_ID_INPUT = "recordId"
FLOW_FINISHED_STATUSES = frozenset({"FINISHED", "FINISHED_SCREEN"})
FLOW_COMPLETED_MESSAGE = "Reservation completed successfully!"


class ReservationService(Protocol):
    async def create_reservation(
        self,
        check_in_date: date,
        check_out_date: date,
        guests: int,
        items_json: str,
        campaign_type: str = "",
    ) -> str: ...


class SubmissionStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


_ALLOWED_TRANSITIONS = {
    SubmissionStatus.IDLE: {SubmissionStatus.SUBMITTING},
    SubmissionStatus.SUBMITTING: {SubmissionStatus.SUCCESS, SubmissionStatus.FAILED},
    SubmissionStatus.SUCCESS: {SubmissionStatus.IDLE},
    SubmissionStatus.FAILED: {SubmissionStatus.IDLE},
}


class SubmissionTransitionError(ValueError):
    """Raised when an invalid submission state transition is requested."""

    def __init__(self, current: SubmissionStatus, target: SubmissionStatus):
        super().__init__(f"Invalid submission transition: {current.value} -> {target.value}")
        self.current = current
        self.target = target


def success_message(reservation_id: str) -> str:
    return f"Reservation created successfully! (ID: {reservation_id})"


class BookingSubmitter:
    """Turns the cart and query into a reservation.

    Idle -> Submitting -> {Success, Failed}; Success and Failed both return to
    Idle before the next attempt. The Submitting status is the only guard
    against duplicate reservations and has no timeout unless
    ``submit_timeout_seconds`` is set.
    """

    def __init__(
        self,
        service: ReservationService,
        cart: CartStateManager,
        availability: AvailabilitySession,
        flow_api_name: Optional[str] = None,
        submit_timeout_seconds: Optional[float] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self._service = service
        self._cart = cart
        self._availability = availability
        self._on_change = on_change
        self.flow_api_name = flow_api_name or None
        self.submit_timeout_seconds = submit_timeout_seconds

        self.status = SubmissionStatus.IDLE
        self.success_message: Optional[str] = None
        self.reservation_id: Optional[str] = None
        self.show_flow = False
        self.flow_input_variables: tuple[FlowInputVariable, ...] = ()

    @property
    def is_submitting(self) -> bool:
        return self.status is SubmissionStatus.SUBMITTING

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _transition(self, target: SubmissionStatus) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise SubmissionTransitionError(self.status, target)
        logger.debug("Submission status changed", previous=self.status.value, status=target.value)
        self.status = target

    def build_request(self) -> ReservationRequest:
        query = self._availability.query
        return ReservationRequest(
            check_in_date=query.check_in_date,
            check_out_date=query.check_out_date,
            guests=query.guests,
            items=tuple(
                ReservationItem(product_id=item.product_id, quantity=item.quantity)
                for item in self._cart.items
            ),
            campaign_type=query.campaign_type or "",
        )

    async def _create_reservation(self, request: ReservationRequest) -> str:
        try:
            call = self._service.create_reservation(
                check_in_date=request.check_in_date,
                check_out_date=request.check_out_date,
                guests=request.guests,
                items_json=request.items_json(),
                campaign_type=request.campaign_type,
            )
            if self.submit_timeout_seconds:
                return await asyncio.wait_for(call, timeout=self.submit_timeout_seconds)
            return await call
        except asyncio.TimeoutError as e:
            raise BookingSubmissionError(GENERIC_BOOKING_ERROR) from e
        except Exception as e:
            raise BookingSubmissionError(error_message_from(e, GENERIC_BOOKING_ERROR)) from e

    async def submit(self) -> SubmissionStatus:
        """Submit the current cart.

        No-op when the cart is empty or a submission is already in flight.
        On success the cart is cleared, inventory is re-queried and either the
        workflow hand-off is prepared or a plain success message is set. On
        failure the cart is kept and the error message is surfaced.
        """
        if self._cart.state.is_empty or self.is_submitting:
            logger.debug(
                "Submission ignored",
                cart_empty=self._cart.state.is_empty,
                submitting=self.is_submitting,
            )
            return self.status

        if self.status is not SubmissionStatus.IDLE:
            self._transition(SubmissionStatus.IDLE)
        self._transition(SubmissionStatus.SUBMITTING)
        self._availability.clear_error()
        self.success_message = None
        self._notify()

        request = self.build_request()
        logger.info(
            "Submitting reservation",
            check_in_date=request.check_in_date.isoformat(),
            check_out_date=request.check_out_date.isoformat(),
            guests=request.guests,
            item_count=len(request.items),
            campaign_type=request.campaign_type or None,
        )

        try:
            reservation_id = await self._create_reservation(request)
        except BookingSubmissionError as e:
            logger.error("Reservation submission failed", error=e.message)
            self._availability.set_error(e.message)
            self._transition(SubmissionStatus.FAILED)
            self._notify()
            return self.status

        self.reservation_id = reservation_id
        self._cart.clear()
        if self.flow_api_name:
            self.flow_input_variables = (
                FlowInputVariable(name=FLOW_RECORD_ID_INPUT, type="String", value=reservation_id),
            )
            self.show_flow = True
            logger.info(
                "Handing reservation off to workflow",
                reservation_id=reservation_id,
                flow_api_name=self.flow_api_name,
            )
        else:
            self.success_message = success_message(reservation_id)
            logger.info("Reservation created", reservation_id=reservation_id)
        self._transition(SubmissionStatus.SUCCESS)
        self._notify()

        # Inventory has just decreased
        await self._availability.query_availability()
        return self.status

    def handle_flow_status(self, status: str) -> bool:
        """Return control from the workflow once it reports a terminal status."""
        if status not in FLOW_FINISHED_STATUSES:
            return False
        self.show_flow = False
        self.success_message = FLOW_COMPLETED_MESSAGE
        logger.info("Post-booking workflow finished", status=status)
        return True
