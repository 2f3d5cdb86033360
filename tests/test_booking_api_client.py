"""Tests for BookingAPIClient with httpx mocked out."""

import json
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from hostel_booking.clients import (
    BookingAPIAuthenticationError,
    BookingAPIClient,
    BookingAPIClientError,
    BookingAPINotFoundError,
    BookingAPIServerError,
)


def _response(status_code, payload=None):
    response = Mock()
    response.status_code = status_code
    response.text = json.dumps(payload) if payload is not None else ""
    response.json = Mock(return_value=payload)
    return response


def _async_client(*responses):
    mock_async_client = AsyncMock()
    mock_async_client.request = AsyncMock(side_effect=list(responses))
    mock_async_client.__aenter__ = AsyncMock(return_value=mock_async_client)
    mock_async_client.__aexit__ = AsyncMock(return_value=None)
    return mock_async_client


@pytest.fixture
def no_backoff():
    with patch(
        "hostel_booking.clients.booking_api_client.asyncio.sleep", new_callable=AsyncMock
    ) as sleep:
        yield sleep


class TestAvailability:
    """Tests for the availability lookup."""

    @pytest.mark.asyncio
    async def test_posts_stay_and_returns_offerings(self, availability_response):
        """Availability is a POST of the stay in camelCase."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client = _async_client(_response(200, availability_response))
            mock_client.return_value = mock_async_client

            client = BookingAPIClient()
            offerings = await client.get_available_accommodations(
                "2024-06-03", "2024-06-05", 2, campaign_type="SUMMER"
            )

            assert [o["productId"] for o in offerings] == ["DORM-6", "DORM-F4", "PRIV-DBL"]
            call = mock_async_client.request.await_args.kwargs
            assert call["method"] == "POST"
            assert call["url"].endswith("/availability")
            assert call["json"] == {
                "checkInDate": "2024-06-03",
                "checkOutDate": "2024-06-05",
                "guests": 2,
                "campaignType": "SUMMER",
            }

    @pytest.mark.asyncio
    async def test_accepts_wrapped_payload(self, availability_response):
        """An {"accommodations": [...]} payload is unwrapped."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value = _async_client(
                _response(200, {"accommodations": availability_response})
            )

            offerings = await BookingAPIClient().get_available_accommodations(
                "2024-06-03", "2024-06-05", 1
            )

            assert len(offerings) == 3

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self, availability_response, no_backoff):
        """A 5xx on a lookup is retried after backoff."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client = _async_client(
                _response(503, {"message": "Unavailable"}),
                _response(200, availability_response),
            )
            mock_client.return_value = mock_async_client

            offerings = await BookingAPIClient().get_available_accommodations(
                "2024-06-03", "2024-06-05", 1
            )

            assert len(offerings) == 3
            assert mock_async_client.request.await_count == 2
            no_backoff.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_client_error_carries_message_body(self):
        """4xx errors keep the status code and parsed body."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value = _async_client(
                _response(400, {"message": "Check-out must follow check-in"})
            )

            with pytest.raises(BookingAPIClientError) as exc_info:
                await BookingAPIClient().get_available_accommodations(
                    "2024-06-05", "2024-06-03", 1
                )

            assert exc_info.value.status_code == 400
            assert exc_info.value.body == {"message": "Check-out must follow check-in"}

    @pytest.mark.asyncio
    async def test_authentication_error(self):
        """401 maps to BookingAPIAuthenticationError."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value = _async_client(_response(401, {"message": "Denied"}))

            with pytest.raises(BookingAPIAuthenticationError):
                await BookingAPIClient().get_available_accommodations(
                    "2024-06-03", "2024-06-05", 1
                )

    @pytest.mark.asyncio
    async def test_timeouts_exhaust_retries(self, no_backoff):
        """Repeated timeouts give up after max_retries attempts."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client = _async_client()
            mock_async_client.request = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
            mock_client.return_value = mock_async_client

            client = BookingAPIClient()
            with pytest.raises(BookingAPIClientError, match="Request timeout"):
                await client.get_available_accommodations("2024-06-03", "2024-06-05", 1)

            assert mock_async_client.request.await_count == client.max_retries


class TestDateRanges:
    @pytest.mark.asyncio
    async def test_gets_ranges_for_campaign(self, campaign_date_ranges):
        """Date ranges are a GET keyed by campaignType."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client = _async_client(
                _response(200, {"dateRanges": campaign_date_ranges})
            )
            mock_client.return_value = mock_async_client

            ranges = await BookingAPIClient().get_booking_date_ranges("SUMMER")

            assert ranges == campaign_date_ranges
            call = mock_async_client.request.await_args.kwargs
            assert call["method"] == "GET"
            assert call["params"] == {"campaignType": "SUMMER"}

    @pytest.mark.asyncio
    async def test_unknown_campaign(self):
        """404 maps to BookingAPINotFoundError."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value = _async_client(_response(404, {"message": "Not found"}))

            with pytest.raises(BookingAPINotFoundError):
                await BookingAPIClient().get_booking_date_ranges("NOPE")


class TestCreateReservation:
    """Tests for reservation creation."""

    @pytest.mark.asyncio
    async def test_returns_identifier(self):
        """The reservation id is read from the response object."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client = _async_client(_response(201, {"id": "006RES0001"}))
            mock_client.return_value = mock_async_client

            reservation_id = await BookingAPIClient().create_reservation(
                "2024-06-03",
                "2024-06-05",
                2,
                '[{"productId":"DORM-6","quantity":2}]',
            )

            assert reservation_id == "006RES0001"
            payload = mock_async_client.request.await_args.kwargs["json"]
            assert payload["itemsJson"] == '[{"productId":"DORM-6","quantity":2}]'
            assert payload["campaignType"] == ""

    @pytest.mark.asyncio
    async def test_accepts_bare_string_identifier(self):
        """A bare JSON string is taken as the reservation id."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value = _async_client(_response(200, "006RES0009"))

            reservation_id = await BookingAPIClient().create_reservation(
                "2024-06-03", "2024-06-05", 1, "[]"
            )

            assert reservation_id == "006RES0009"

    @pytest.mark.asyncio
    async def test_server_error_is_not_retried(self, no_backoff):
        """Reservation creation is attempted exactly once."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_async_client = _async_client(
                _response(500, {"message": "Try later"}),
                _response(201, {"id": "006RES0001"}),
            )
            mock_client.return_value = mock_async_client

            with pytest.raises(BookingAPIServerError) as exc_info:
                await BookingAPIClient().create_reservation("2024-06-03", "2024-06-05", 1, "[]")

            assert exc_info.value.body == {"message": "Try later"}
            assert mock_async_client.request.await_count == 1
            no_backoff.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_identifier_is_an_error(self):
        """A response without an id raises."""
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value = _async_client(_response(201, {}))

            with pytest.raises(BookingAPIClientError, match="no identifier"):
                await BookingAPIClient().create_reservation("2024-06-03", "2024-06-05", 1, "[]")
