"""
Domain time utilities (pure).

Centralized timestamp validation helper and the billing period value object.

Behavior and error messages must remain consistent across the domain model.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

# 2021-01-17T18:57:34Z
ISO8601_UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces the requirement that timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def format_utc_timestamp(value: datetime) -> str:
    """Format a UTC timestamp as 2021-01-17T18:57:34Z."""

    require_utc_timestamp("timestamp", value)
    return value.strftime(ISO8601_UTC_FORMAT)


@dataclass(frozen=True, slots=True)
class BillingPeriod:
    """
    Time window a call must fall within to be billed.

    By default both boundaries are excluded: a call made exactly at start or
    exactly at end is not part of the period. Setting inclusive=True accepts
    calls on either boundary.
    """

    start: datetime
    end: datetime
    inclusive: bool = False

    def __post_init__(self) -> None:
        require_utc_timestamp("start", self.start)
        require_utc_timestamp("end", self.end)
        if self.end < self.start:
            raise ValueError("end must be >= start")

    def contains(self, moment: datetime) -> bool:
        if self.inclusive:
            return self.start <= moment <= self.end
        return self.start < moment < self.end
