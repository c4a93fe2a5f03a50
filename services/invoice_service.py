"""
Invoice service for generating a subscriber's telephone invoice.

Finds the subscriber, prices every call of the billing period through a
CallProcessor and assembles the invoice with the billed calls and totals.

Calls are trusted as valid: a Call validates its phone numbers, duration and
timestamp when it is built, so no malformed record can reach this service.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Sequence

from domain.call import Call
from domain.promotion import Promotion, default_promotions
from domain.subscriber import Subscriber
from domain.time import BillingPeriod, format_utc_timestamp
from repositories.subscriber_repository import SubscriberFinder
from services.call_processor import CallDurationTotals, CallProcessor

PromotionsFactory = Callable[[Subscriber], Sequence[Promotion]]


@dataclass(frozen=True, slots=True)
class InvoiceCall:
    """
    Billed call line of an invoice.
    """
    phone_number: str  # Destination
    duration: int  # Seconds
    timestamp: str  # 2021-01-17T18:57:34Z
    amount: float


@dataclass(frozen=True, slots=True)
class Invoice:
    """
    Complete invoice for one subscriber and one billing period.

    Includes:
    - Subscriber identity
    - Billed calls, in input order
    - Accumulated seconds per kind of call
    - Total amount (sum of all call amounts)
    """
    subscriber: Subscriber
    calls: List[InvoiceCall]
    durations: CallDurationTotals
    total: float

    @property
    def total_calls(self) -> int:
        """Number of billed calls in this invoice."""
        return len(self.calls)


def generate_invoice(
    subscriber_finder: SubscriberFinder,
    phone_number: str,
    billing_period: BillingPeriod,
    calls: Iterable[Call],
    promotions_factory: PromotionsFactory = default_promotions,
) -> Invoice:
    """
    Generate the invoice of the subscriber owning phone_number.

    Args:
        subscriber_finder: Looks up the subscriber by phone number
        phone_number: Phone number of the subscriber to invoice
        billing_period: Only calls made within this period are billed
        calls: Call records, possibly made by other lines, in input order
        promotions_factory: Builds the ordered promotions for this run

    Returns:
        Invoice with the billed calls and totals

    Raises:
        SubscriberNotFoundError: If no subscriber owns phone_number
        SubscriberLookupError: If the subscriber lookup fails

    Example:
        invoice = generate_invoice(finder, "+5491167950940", period, calls)
        print(f"Total: {invoice.total} for {invoice.total_calls} calls")
    """
    subscriber = subscriber_finder.find_by_phone(phone_number)

    processor = CallProcessor(
        subscriber,
        billing_period,
        promotions_factory(subscriber),
    )

    invoice_calls: List[InvoiceCall] = []
    for call in calls:
        cost = processor.process(call)
        if cost is None:
            continue

        invoice_calls.append(InvoiceCall(
            phone_number=call.destination_phone,
            duration=call.duration,
            timestamp=format_utc_timestamp(call.timestamp),
            amount=cost,
        ))

    summary = processor.summarize()

    return Invoice(
        subscriber=subscriber,
        calls=invoice_calls,
        durations=summary.durations,
        total=summary.total_amount,
    )


def parse_billing_date(value: str) -> datetime:
    """
    Parse a YYYY-MM-DD billing date as UTC midnight.

    Raises:
        ValueError: If the value is not a YYYY-MM-DD date
    """
    parsed = datetime.strptime(value, "%Y-%m-%d")
    return parsed.replace(tzinfo=timezone.utc)


def make_billing_period(start: str, end: str, inclusive: bool = False) -> BillingPeriod:
    """
    Build a BillingPeriod from two YYYY-MM-DD dates.

    Raises:
        ValueError: With a message naming the bad boundary
    """
    try:
        period_start = parse_billing_date(start)
    except ValueError:
        raise ValueError("invalid start date format, expected YYYY-MM-DD") from None

    try:
        period_end = parse_billing_date(end)
    except ValueError:
        raise ValueError("invalid end date format, expected YYYY-MM-DD") from None

    return BillingPeriod(start=period_start, end=period_end, inclusive=inclusive)


__all__ = [
    "Invoice",
    "InvoiceCall",
    "generate_invoice",
    "make_billing_period",
    "parse_billing_date",
]
