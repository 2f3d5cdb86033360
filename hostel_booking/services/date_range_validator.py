"""Validation of a stay interval against campaign booking windows."""

from datetime import date, timedelta
from typing import Optional, Protocol

from structlog import get_logger

from hostel_booking.models.campaign import CampaignWindow
from hostel_booking.services.errors import (
    DATE_RANGE_ERROR_PREFIX,
    CampaignLookupError,
    DateRangeInvalid,
    error_message_from,
)
from hostel_booking.services.formatting import format_windows

logger = get_logger(__name__)


class CampaignWindowSource(Protocol):
    async def get_booking_date_ranges(self, campaign_type: str) -> list[dict]: ...


class DateRangeValidator:
    """Holds the campaign windows and judges stays against them.

    An empty window sequence means "no restriction". When the validator is not
    campaign aware it never loads windows and every stay passes.
    """

    def __init__(self, source: CampaignWindowSource, campaign_aware: bool = True):
        self._source = source
        self.campaign_aware = campaign_aware
        self.windows: tuple[CampaignWindow, ...] = ()

    async def _fetch_windows(self, campaign_type: str) -> tuple[CampaignWindow, ...]:
        try:
            raw_windows = await self._source.get_booking_date_ranges(campaign_type)
            return tuple(CampaignWindow.model_validate(raw) for raw in raw_windows or [])
        except Exception as e:
            raise CampaignLookupError(error_message_from(e, str(e))) from e

    async def load(self, campaign_type: Optional[str]) -> tuple[CampaignWindow, ...]:
        """Load the windows of a campaign.

        A failed lookup degrades to unrestricted mode so booking stays possible.
        """
        if not self.campaign_aware or not campaign_type:
            self.windows = ()
            return self.windows

        try:
            self.windows = await self._fetch_windows(campaign_type)
            logger.info(
                "Campaign windows loaded",
                campaign_type=campaign_type,
                window_count=len(self.windows),
            )
        except CampaignLookupError as e:
            logger.warning(
                "Campaign window lookup failed, proceeding unrestricted",
                campaign_type=campaign_type,
                error=e.message,
            )
            self.windows = ()
        return self.windows

    @property
    def is_restricted(self) -> bool:
        return self.campaign_aware and len(self.windows) > 0

    def fits_single_window(self, check_in: date, check_out: date) -> bool:
        """True when unrestricted, or when one window holds the whole stay."""
        if not self.is_restricted:
            return True
        return any(window.contains_stay(check_in, check_out) for window in self.windows)

    def constrain_initial(self, check_in: date, check_out: date) -> tuple[date, date]:
        """Snap an invalid stay to the first night of the first window, in service order."""
        if self.fits_single_window(check_in, check_out):
            return check_in, check_out

        first = self.windows[0]
        snapped_check_out = min(first.start_date + timedelta(days=1), first.end_date)
        logger.info(
            "Stay snapped to first campaign window",
            requested_check_in=check_in.isoformat(),
            requested_check_out=check_out.isoformat(),
            check_in=first.start_date.isoformat(),
            check_out=snapped_check_out.isoformat(),
        )
        return first.start_date, snapped_check_out

    def formatted_windows(self) -> str:
        return format_windows(self.windows)

    def ensure_fits(self, check_in: date, check_out: date) -> None:
        """Raise DateRangeInvalid unless the stay fits a single window."""
        if not self.fits_single_window(check_in, check_out):
            raise DateRangeInvalid(DATE_RANGE_ERROR_PREFIX + self.formatted_windows())

    def validate(self, check_in: date, check_out: date) -> Optional[str]:
        """Blocking error message for an invalid stay, None when valid."""
        try:
            self.ensure_fits(check_in, check_out)
        except DateRangeInvalid as e:
            logger.info(
                "Stay outside campaign windows",
                check_in=check_in.isoformat(),
                check_out=check_out.isoformat(),
            )
            return e.message
        return None

    @property
    def date_picker_min(self) -> Optional[date]:
        return self.windows[0].start_date if self.is_restricted else None

    @property
    def date_picker_max(self) -> Optional[date]:
        return self.windows[-1].end_date if self.is_restricted else None
