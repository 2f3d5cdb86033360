"""Tests for the command-line entry point."""

import json
from unittest.mock import patch

import pytest

from hostel_booking.main import main


@pytest.fixture
def patched_client(mock_client):
    with patch("hostel_booking.services.booking_widget.BookingAPIClient", return_value=mock_client):
        yield mock_client


class TestMain:
    @pytest.mark.asyncio
    async def test_search_and_book(self, patched_client, capsys):
        """The CLI searches, selects, books and prints the view."""
        exit_code = await main(
            [
                "--check-in", "2024-06-03",
                "--check-out", "2024-06-05",
                "--guests", "2",
                "--select", "PRIV-DBL",
                "--quantity", "PRIV-DBL=2",
                "--book",
            ]
        )

        assert exit_code == 0
        view = json.loads(capsys.readouterr().out)
        assert view["booking_success"] == "Reservation created successfully! (ID: 006RES0001)"
        items = json.loads(patched_client.create_reservation.await_args.kwargs["items_json"])
        assert items == [{"productId": "PRIV-DBL", "quantity": 2}]

    @pytest.mark.asyncio
    async def test_lookup_error_exits_non_zero(self, patched_client, capsys):
        """A lookup error exits with status 1."""
        patched_client.get_available_accommodations.side_effect = RuntimeError()

        exit_code = await main(["--check-in", "2024-06-03"])

        assert exit_code == 1
        assert json.loads(capsys.readouterr().out)["error"] == "An error occurred"

    @pytest.mark.asyncio
    async def test_repeated_select_keeps_offering(self, patched_client, capsys):
        """Selecting the same offering twice on the command line does not deselect it."""
        exit_code = await main(
            ["--check-in", "2024-06-03", "--select", "PRIV-DBL", "--select", "PRIV-DBL"]
        )

        assert exit_code == 0
        view = json.loads(capsys.readouterr().out)
        assert [item["product_id"] for item in view["cart_items"]] == ["PRIV-DBL"]
