"""Command-line entry point: run one search (and optionally a booking) through the widget."""

import argparse
import asyncio
import json
import sys
from typing import Optional, Sequence

from hostel_booking.config import configure_logging, get_logger, settings
from hostel_booking.services import HostelBookingWidget

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search availability and book a stay")
    parser.add_argument("--check-in", help="Check-in date (YYYY-MM-DD)")
    parser.add_argument("--check-out", help="Check-out date (YYYY-MM-DD)")
    parser.add_argument("--guests", default="1", help="Number of guests")
    parser.add_argument("--campaign-type", default=None, help="Restrict to a campaign's windows")
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="PRODUCT_ID",
        help="Select an offering (repeatable, duplicates ignored)",
    )
    parser.add_argument(
        "--quantity",
        action="append",
        default=[],
        metavar="PRODUCT_ID=QTY",
        help="Set a selected offering's quantity (repeatable)",
    )
    parser.add_argument("--book", action="store_true", help="Submit the reservation")
    return parser


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Drive the widget once and print the final view model as JSON.

    Returns:
        0 when the run ends without an error message, 1 otherwise
    """
    args = build_parser().parse_args(argv)
    logger.info("Starting booking widget run", environment=settings.environment)

    widget = HostelBookingWidget(campaign_type=args.campaign_type)
    await widget.start()

    if args.check_in:
        await widget.change_check_in(args.check_in)
    if args.check_out:
        await widget.change_check_out(args.check_out)
    if str(args.guests) != widget.availability.query.guest_count:
        await widget.change_guests(args.guests)

    for product_id in dict.fromkeys(args.select):
        widget.toggle_select(product_id)
    for assignment in args.quantity:
        product_id, _, quantity = assignment.partition("=")
        widget.change_quantity(product_id, quantity)

    if args.book:
        await widget.book_now()

    view = widget.view_model()
    print(json.dumps(view.model_dump(mode="json"), indent=2))

    if view.error or view.date_error:
        logger.error("Booking widget run ended with an error", error=view.error or view.date_error)
        return 1
    return 0


def run_sync() -> int:
    """Run the async main function synchronously.

    Returns:
        Exit code from main()
    """
    configure_logging()
    return asyncio.run(main())


if __name__ == "__main__":
    sys.exit(run_sync())
