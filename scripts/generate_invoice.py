#!/usr/bin/env python3
"""
Invoice Generator CLI

Generates the invoice of a subscriber from a CSV file of calls:
- Subscriber data (name, address, friends) fetched from the users service
- Calls outside the billing period or made by other lines are skipped
- Invoice printed as JSON on stdout, progress logged on stderr

Usage:
    python generate_invoice.py <telephone> <billing_start> <billing_end> <calls_csv_file>
    python generate_invoice.py +5491167950940 2020-01-01 2022-09-01 calls.csv
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.models import InvoiceResponse
from repositories.client import create_http_client
from repositories.subscriber_repository import (
    HttpSubscriberFinder,
    SubscriberFinder,
    SubscriberLookupError,
    SubscriberNotFoundError,
)
from scripts.call_records import CallRecordError, CallsFileError, read_calls
from services.invoice_service import generate_invoice, make_billing_period

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="generate-invoice",
        description="Generate a telephone invoice from a CSV file of calls",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Invoice for 2020-01-01 (excluded) to 2022-09-01 (excluded)
  generate-invoice +5491167950940 2020-01-01 2022-09-01 calls.csv

  # Bill calls made exactly on the period boundaries too
  generate-invoice +5491167950940 2020-01-01 2022-09-01 calls.csv --inclusive-period

  # Drop malformed rows instead of failing
  generate-invoice +5491167950940 2020-01-01 2022-09-01 calls.csv --skip-invalid-calls
        """
    )

    parser.add_argument(
        "telephone",
        help="Phone number of the subscriber to invoice (e.g. +5491167950940)"
    )

    parser.add_argument(
        "billing_start",
        help="Billing period start date, YYYY-MM-DD (UTC)"
    )

    parser.add_argument(
        "billing_end",
        help="Billing period end date, YYYY-MM-DD (UTC)"
    )

    parser.add_argument(
        "calls_csv_file",
        help="Path to the CSV file with the calls"
    )

    parser.add_argument(
        "--inclusive-period",
        action="store_true",
        help="Bill calls made exactly at the period start or end"
    )

    parser.add_argument(
        "--skip-invalid-calls",
        action="store_true",
        help="Skip malformed CSV rows instead of failing"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug information to stderr"
    )

    return parser


def main(argv: Optional[List[str]] = None, subscriber_finder: Optional[SubscriberFinder] = None) -> int:
    """
    Main entry point for the CLI.

    subscriber_finder replaces the users service lookup when given.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        billing_period = make_billing_period(
            args.billing_start,
            args.billing_end,
            inclusive=args.inclusive_period,
        )
    except ValueError as e:
        parser.error(f"invalid billing period format: {e}")

    http_client = None
    if subscriber_finder is None:
        try:
            http_client = create_http_client()
        except RuntimeError as e:
            logger.error("configuring users service: %s", e)
            return 1
        subscriber_finder = HttpSubscriberFinder(http_client)

    try:
        calls = read_calls(args.calls_csv_file, skip_invalid=args.skip_invalid_calls)
        invoice = generate_invoice(subscriber_finder, args.telephone, billing_period, calls)

    except KeyboardInterrupt:
        logger.error("Invoice generation interrupted by user")
        return 130

    except (FileNotFoundError, CallsFileError, CallRecordError) as e:
        logger.error("reading calls: %s", e)
        return 1

    except (SubscriberNotFoundError, SubscriberLookupError) as e:
        logger.error("generating invoice: finding user: %s", e)
        return 1

    finally:
        if http_client is not None:
            http_client.close()

    print(InvoiceResponse.from_invoice(invoice).model_dump_json(indent=2))
    logger.info(
        "Generated invoice successfully",
        extra={"calls": invoice.total_calls, "total": invoice.total},
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
