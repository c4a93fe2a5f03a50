"""
Domain: Call entity.

Contract excerpts implemented here:
- A Call is a single usage record: source phone, destination phone, duration
  in whole seconds and the instant it was made.
- timestamp is a UTC timestamp and is authoritative.
- Both phone numbers are validated at construction; a malformed record is
  rejected and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .phone_number import validate_phone_number
from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class Call:
    """
    Immutable phone call record.

    Construction raises InvalidPhoneNumberError for malformed phone numbers and
    ValueError for negative durations or non-UTC timestamps, so any Call that
    exists is safe to classify and price.
    """

    destination_phone: str
    source_phone: str
    duration: int  # Seconds
    timestamp: datetime

    def __post_init__(self) -> None:
        validate_phone_number(self.destination_phone, "destination phone")
        validate_phone_number(self.source_phone, "source phone")

        if isinstance(self.duration, bool) or not isinstance(self.duration, int):
            raise ValueError("duration must be a whole number of seconds")
        if self.duration < 0:
            raise ValueError("duration must be >= 0")

        require_utc_timestamp("timestamp", self.timestamp)
