import json
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
from structlog.testing import capture_logs

from hostel_booking.models import AccommodationOffering, CampaignWindow, SearchQuery

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def captured_logs():
    """Capture structlog output so it stays out of stdout."""
    with capture_logs() as logs:
        yield logs


@pytest.fixture
def availability_response():
    """Load the availability lookup response from fixture."""
    with open(FIXTURES_DIR / "booking_api" / "availability_response.json") as f:
        return json.load(f)


@pytest.fixture
def campaign_date_ranges():
    """Load campaign date ranges with a gap between two windows."""
    with open(FIXTURES_DIR / "booking_api" / "campaign_date_ranges.json") as f:
        return json.load(f)


@pytest.fixture
def offerings(availability_response):
    """Parsed offerings: DORM-6 (3 left), DORM-F4 (8 left), PRIV-DBL (2 left)."""
    return tuple(AccommodationOffering.model_validate(raw) for raw in availability_response)


@pytest.fixture
def campaign_windows(campaign_date_ranges):
    return tuple(CampaignWindow.model_validate(raw) for raw in campaign_date_ranges)


@pytest.fixture
def search_query():
    return SearchQuery(
        check_in_date=date(2024, 6, 3),
        check_out_date=date(2024, 6, 5),
        guest_count="2",
    )


@pytest.fixture
def mock_client(availability_response, campaign_date_ranges):
    """Mock of the three remote booking operations."""
    client = Mock()
    client.get_available_accommodations = AsyncMock(return_value=availability_response)
    client.get_booking_date_ranges = AsyncMock(return_value=campaign_date_ranges)
    client.create_reservation = AsyncMock(return_value="006RES0001")
    return client
