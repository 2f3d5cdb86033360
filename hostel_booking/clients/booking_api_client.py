"""Booking backend API client for availability, campaign windows and reservations."""

import asyncio
from datetime import date
from typing import Any, Optional, Union

import httpx
from structlog import get_logger

from hostel_booking.config import settings

logger = get_logger(__name__)

DateLike = Union[date, str]


class BookingAPIClientError(Exception):
    """Base exception for booking API client errors.

    Carries the HTTP status code and the parsed error payload (if any) so that
    callers can surface the server-provided message to the user.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class BookingAPIAuthenticationError(BookingAPIClientError):
    """Raised when booking API authentication fails."""

    pass


class BookingAPINotFoundError(BookingAPIClientError):
    """Raised when a booking API resource is not found."""

    pass


class BookingAPIServerError(BookingAPIClientError):
    """Raised when the booking API returns a server error."""

    pass


def _iso(value: DateLike) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


class BookingAPIClient:
    """Client for the three booking backend operations."""

    def __init__(self):
        """Initialize the booking API client with settings."""
        self.base_url = settings.booking_api.base_url.rstrip("/")
        self.api_key = (settings.booking_api.api_key or "").strip()
        self.timeout = settings.booking_api.request_timeout
        self.max_retries = max(1, settings.booking_api.max_retries)
        self.retry_backoff_base = 2  # Exponential backoff base

    def _get_headers(self) -> dict[str, str]:
        """Get default headers for booking API requests.

        Returns:
            Dictionary of HTTP headers, including the bearer token when configured.
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": "HostelBookingWidget/1.0",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @staticmethod
    def _error_body(response: httpx.Response) -> Optional[dict[str, Any]]:
        """Parse a failure payload, returning None when it is not a JSON object."""
        try:
            payload = response.json()
        except ValueError:
            return None
        return payload if isinstance(payload, dict) else None

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        retry: bool = True,
    ) -> Any:
        """Make an HTTP request to the booking API with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path (without base URL)
            data: Request body data (for POST requests)
            params: Query parameters
            retry: Whether server errors and transport failures are retried.
                Must be False for non-idempotent calls.

        Returns:
            Decoded JSON response (object, list or scalar)

        Raises:
            BookingAPIAuthenticationError: If authentication fails
            BookingAPINotFoundError: If resource not found
            BookingAPIServerError: If server error occurs
            BookingAPIClientError: For other API errors
        """
        url = f"{self.base_url}{endpoint}"
        headers = self._get_headers()
        attempts = self.max_retries if retry else 1

        for attempt in range(attempts):
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(
                        method=method,
                        url=url,
                        headers=headers,
                        json=data,
                        params=params,
                    )

                    if response.status_code in (401, 403):
                        logger.error(
                            "Booking API authentication failed",
                            endpoint=endpoint,
                            status_code=response.status_code,
                        )
                        raise BookingAPIAuthenticationError(
                            f"Authentication failed for {endpoint}",
                            status_code=response.status_code,
                            body=self._error_body(response),
                        )

                    if response.status_code == 404:
                        logger.warning(
                            "Booking API resource not found",
                            endpoint=endpoint,
                            status_code=response.status_code,
                        )
                        raise BookingAPINotFoundError(
                            f"Resource not found: {endpoint}",
                            status_code=response.status_code,
                            body=self._error_body(response),
                        )

                    # Handle server errors with retry
                    if response.status_code >= 500:
                        if attempt < attempts - 1:
                            wait_time = self.retry_backoff_base ** attempt
                            logger.warning(
                                "Booking API server error, retrying",
                                endpoint=endpoint,
                                status_code=response.status_code,
                                attempt=attempt + 1,
                                max_retries=attempts,
                                wait_seconds=wait_time,
                            )
                            await asyncio.sleep(wait_time)
                            continue
                        logger.error(
                            "Booking API server error",
                            endpoint=endpoint,
                            status_code=response.status_code,
                            retried=retry,
                        )
                        raise BookingAPIServerError(
                            f"Server error at {endpoint}: {response.text}",
                            status_code=response.status_code,
                            body=self._error_body(response),
                        )

                    # Handle client errors (non-auth, non-404)
                    if 400 <= response.status_code < 500:
                        logger.error(
                            "Booking API client error",
                            endpoint=endpoint,
                            status_code=response.status_code,
                            response_text=response.text[:200],
                        )
                        raise BookingAPIClientError(
                            f"Client error at {endpoint}: {response.text}",
                            status_code=response.status_code,
                            body=self._error_body(response),
                        )

                    if response.status_code in (200, 201, 204):
                        logger.debug(
                            "Booking API request successful",
                            endpoint=endpoint,
                            method=method,
                            status_code=response.status_code,
                        )
                        if response.text:
                            return response.json()
                        return {}

                    logger.error(
                        "Unexpected booking API response status",
                        endpoint=endpoint,
                        status_code=response.status_code,
                    )
                    raise BookingAPIClientError(
                        f"Unexpected response from {endpoint}: {response.status_code}",
                        status_code=response.status_code,
                    )

            except httpx.TimeoutException as e:
                if attempt < attempts - 1:
                    wait_time = self.retry_backoff_base ** attempt
                    logger.warning(
                        "Booking API request timeout, retrying",
                        endpoint=endpoint,
                        attempt=attempt + 1,
                        max_retries=attempts,
                        wait_seconds=wait_time,
                    )
                    await asyncio.sleep(wait_time)
                    continue
                logger.error("Booking API request timeout", endpoint=endpoint)
                raise BookingAPIClientError(f"Request timeout for {endpoint}") from e

            except httpx.RequestError as e:
                if attempt < attempts - 1:
                    wait_time = self.retry_backoff_base ** attempt
                    logger.warning(
                        "Booking API request error, retrying",
                        endpoint=endpoint,
                        error=str(e),
                        attempt=attempt + 1,
                        max_retries=attempts,
                        wait_seconds=wait_time,
                    )
                    await asyncio.sleep(wait_time)
                    continue
                logger.error(
                    "Booking API request error",
                    endpoint=endpoint,
                    error=str(e),
                )
                raise BookingAPIClientError(
                    f"Request failed for {endpoint}: {str(e)}"
                ) from e

        raise BookingAPIClientError(f"Failed to complete request to {endpoint}")

    async def get_available_accommodations(
        self,
        check_in_date: DateLike,
        check_out_date: DateLike,
        guests: int,
        campaign_type: str = "",
    ) -> list[dict[str, Any]]:
        """Fetch offerings available for a stay.

        Args:
            check_in_date: Check-in date (ISO format when given as string)
            check_out_date: Check-out date
            guests: Number of guests (>= 1)
            campaign_type: Campaign restriction, empty for none

        Returns:
            Ordered list of raw offering dictionaries

        Raises:
            BookingAPIClientError: If the API request fails
        """
        logger.info(
            "Fetching available accommodations",
            check_in_date=_iso(check_in_date),
            check_out_date=_iso(check_out_date),
            guests=guests,
            campaign_type=campaign_type or None,
        )
        payload = {
            "checkInDate": _iso(check_in_date),
            "checkOutDate": _iso(check_out_date),
            "guests": guests,
            "campaignType": campaign_type or "",
        }
        response = await self._make_request(
            "POST", settings.booking_api.availability_path, data=payload
        )
        offerings = response.get("accommodations", []) if isinstance(response, dict) else response
        logger.info(
            "Successfully fetched available accommodations",
            offering_count=len(offerings),
        )
        return offerings

    async def get_booking_date_ranges(self, campaign_type: str) -> list[dict[str, Any]]:
        """Fetch the booking windows of a campaign, ascending by start date.

        Args:
            campaign_type: Campaign identifier

        Returns:
            List of {startDate, endDate} dictionaries

        Raises:
            BookingAPIClientError: If the API request fails
        """
        logger.info("Fetching campaign date ranges", campaign_type=campaign_type)
        response = await self._make_request(
            "GET",
            settings.booking_api.date_ranges_path,
            params={"campaignType": campaign_type},
        )
        ranges = response.get("dateRanges", []) if isinstance(response, dict) else response
        logger.info(
            "Successfully fetched campaign date ranges",
            campaign_type=campaign_type,
            range_count=len(ranges),
        )
        return ranges

    async def create_reservation(
        self,
        check_in_date: DateLike,
        check_out_date: DateLike,
        guests: int,
        items_json: str,
        campaign_type: str = "",
    ) -> str:
        """Create a reservation. Attempted exactly once, never retried.

        Args:
            check_in_date: Check-in date
            check_out_date: Check-out date
            guests: Number of guests
            items_json: JSON text of [{productId, quantity}, ...]
            campaign_type: Campaign restriction, empty for none

        Returns:
            Reservation identifier

        Raises:
            BookingAPIClientError: If the API request fails or no identifier is returned
        """
        logger.info(
            "Creating reservation",
            check_in_date=_iso(check_in_date),
            check_out_date=_iso(check_out_date),
            guests=guests,
            campaign_type=campaign_type or None,
        )
        payload = {
            "checkInDate": _iso(check_in_date),
            "checkOutDate": _iso(check_out_date),
            "guests": guests,
            "itemsJson": items_json,
            "campaignType": campaign_type or "",
        }
        response = await self._make_request(
            "POST", settings.booking_api.reservations_path, data=payload, retry=False
        )

        if isinstance(response, dict):
            reservation_id = (
                response.get("id") or response.get("reservationId") or response.get("recordId")
            )
        else:
            reservation_id = response
        if reservation_id in (None, "", {}):
            raise BookingAPIClientError("Reservation service returned no identifier")

        logger.info("Successfully created reservation", reservation_id=str(reservation_id))
        return str(reservation_id)
