"""
Invoices API Endpoints.

Endpoints for generating subscriber invoices.
"""

import logging
from datetime import datetime, time, timezone
from typing import Iterator, List

from fastapi import APIRouter, Depends, HTTPException

from api.models import CallRecordRequest, ErrorResponse, InvoiceRequest, InvoiceResponse
from domain.call import Call
from domain.time import BillingPeriod
from repositories.client import create_http_client
from repositories.subscriber_repository import (
    HttpSubscriberFinder,
    SubscriberFinder,
    SubscriberLookupError,
    SubscriberNotFoundError,
)
from services.invoice_service import generate_invoice

logger = logging.getLogger(__name__)

router = APIRouter()


def get_subscriber_finder() -> Iterator[SubscriberFinder]:
    """Subscriber finder backed by the users service, closed after the request."""
    with create_http_client() as client:
        yield HttpSubscriberFinder(client)


def _to_utc(value: datetime) -> datetime:
    """Naive timestamps are taken as UTC; aware ones are converted."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _build_calls(records: List[CallRecordRequest]) -> List[Call]:
    calls: List[Call] = []
    for index, record in enumerate(records):
        try:
            calls.append(Call(
                destination_phone=record.destination_phone,
                source_phone=record.source_phone,
                duration=record.duration,
                timestamp=_to_utc(record.timestamp),
            ))
        except ValueError as e:
            raise HTTPException(
                status_code=422,
                detail=f"call #{index}: {e}"
            ) from e
    return calls


@router.post(
    "/invoices",
    response_model=InvoiceResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Subscriber not found"},
        502: {"model": ErrorResponse, "description": "Users service failure"},
    },
    summary="Generate Invoice",
    description="Generate the invoice of a subscriber for the given billing period and calls."
)
def create_invoice(
    request: InvoiceRequest,
    subscriber_finder: SubscriberFinder = Depends(get_subscriber_finder),
):
    """
    Generate an invoice for the subscriber owning `phone_number`.

    **How it works:**
    1. Validates every call record (phone number format, duration, timestamp)
    2. Looks up the subscriber in the users service
    3. Bills the calls made by the subscriber within the billing period
    4. Returns billed calls, per category seconds and the total

    Billing period boundaries are excluded: calls made exactly at the start or
    end instant (midnight UTC) are not billed.
    """
    calls = _build_calls(request.calls)

    try:
        billing_period = BillingPeriod(
            start=datetime.combine(request.billing_period_start, time.min, tzinfo=timezone.utc),
            end=datetime.combine(request.billing_period_end, time.min, tzinfo=timezone.utc),
        )
    except ValueError as e:
        raise HTTPException(
            status_code=422,
            detail=f"invalid billing period: {e}"
        ) from e

    try:
        invoice = generate_invoice(
            subscriber_finder,
            request.phone_number,
            billing_period,
            calls,
        )

    except SubscriberNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except SubscriberLookupError as e:
        logger.error(
            "Invoice generation failed looking up subscriber",
            extra={"phone_number": request.phone_number, "error": str(e)},
        )
        raise HTTPException(
            status_code=502,
            detail=f"Failed to find subscriber: {e}"
        ) from e

    return InvoiceResponse.from_invoice(invoice)
