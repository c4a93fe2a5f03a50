"""
API Request and Response Models.

Pydantic models for validating API requests and serializing invoices. The
invoice JSON produced here is also what the command-line generator prints.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from services.invoice_service import Invoice


# ============================================================================
# Invoice Request Models
# ============================================================================

class CallRecordRequest(BaseModel):
    """Single call record to be billed."""
    source_phone: str
    destination_phone: str
    duration: int = Field(..., ge=0, description="Call duration in whole seconds")
    timestamp: datetime = Field(..., description="UTC instant the call was made")


class InvoiceRequest(BaseModel):
    """Request to generate an invoice."""
    phone_number: str = Field(..., description="Phone number of the subscriber to invoice")
    billing_period_start: date
    billing_period_end: date
    calls: List[CallRecordRequest] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "phone_number": "+5491167950940",
                "billing_period_start": "2020-01-01",
                "billing_period_end": "2022-09-01",
                "calls": [
                    {
                        "source_phone": "+5491167950940",
                        "destination_phone": "+191167980952",
                        "duration": 462,
                        "timestamp": "2020-11-10T04:02:45Z"
                    }
                ]
            }
        }
    )


# ============================================================================
# Invoice Response Models
# ============================================================================

class InvoiceUserResponse(BaseModel):
    """Subscriber identity printed on the invoice."""
    address: str
    name: str
    phone_number: str


class InvoiceCallResponse(BaseModel):
    """Single billed call."""
    phone_number: str  # Destination
    duration: int
    timestamp: str
    amount: float


class InvoiceResponse(BaseModel):
    """Complete invoice."""
    user: InvoiceUserResponse
    calls: List[InvoiceCallResponse]
    total_international_seconds: int
    total_national_seconds: int
    total_friends_seconds: int
    total_interplanetary_seconds: int
    total: float

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user": {
                    "address": "Calle Falsa 123",
                    "name": "Hideo Kojima",
                    "phone_number": "+5491167950940"
                },
                "calls": [
                    {
                        "phone_number": "+191167980952",
                        "duration": 462,
                        "timestamp": "2020-11-10T04:02:45Z",
                        "amount": 462.0
                    }
                ],
                "total_international_seconds": 462,
                "total_national_seconds": 0,
                "total_friends_seconds": 0,
                "total_interplanetary_seconds": 0,
                "total": 462.0
            }
        }
    )

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceResponse":
        durations = invoice.durations
        return cls(
            user=InvoiceUserResponse(
                address=invoice.subscriber.address,
                name=invoice.subscriber.name,
                phone_number=invoice.subscriber.phone_number,
            ),
            calls=[
                InvoiceCallResponse(
                    phone_number=call.phone_number,
                    duration=call.duration,
                    timestamp=call.timestamp,
                    amount=call.amount,
                )
                for call in invoice.calls
            ],
            total_international_seconds=durations.total_international_seconds,
            total_national_seconds=durations.total_national_seconds,
            total_friends_seconds=durations.total_friends_seconds,
            total_interplanetary_seconds=durations.total_interplanetary_seconds,
            total=invoice.total,
        )


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int
