"""
Call processor for pricing calls one by one.

Processes the calls of a single subscriber within a billing period, returning
the cost of each one with any suitable promotion applied. It also keeps the
running total amount and the accumulated durations per kind of call.

Calls must be fed in input order: the free friend calls allowance depends on
the calls processed before.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from domain.call import Call
from domain.call_type import call_type_for
from domain.promotion import Promotion, price_call
from domain.subscriber import Subscriber
from domain.time import BillingPeriod


@dataclass(frozen=True, slots=True)
class CallDurationTotals:
    """
    Accumulated seconds per kind of call.

    Friend calls are counted in total_friends_seconds and also in the total of
    their own category.
    """

    total_national_seconds: int = 0
    total_international_seconds: int = 0
    total_interplanetary_seconds: int = 0
    total_friends_seconds: int = 0


@dataclass(frozen=True, slots=True)
class CallSummary:
    total_amount: float
    durations: CallDurationTotals


class CallProcessor:
    """
    Prices the calls of one subscriber for one billing period.

    One instance per invoice run; it holds the promotion counters and must not
    be shared.
    """

    def __init__(
        self,
        subscriber: Subscriber,
        billing_period: BillingPeriod,
        promotions: Sequence[Promotion],
    ) -> None:
        self._subscriber = subscriber
        self._billing_period = billing_period
        self._promotions: List[Promotion] = list(promotions)

        self._total_amount = 0.0
        self._national_seconds = 0
        self._international_seconds = 0
        self._interplanetary_seconds = 0
        self._friends_seconds = 0

    def process(self, call: Call) -> Optional[float]:
        """
        Process a call and return its cost.

        Returns None when the call is skipped because it was made by another
        line or outside the billing period. Skipped calls leave every total
        untouched.
        """

        if self._should_skip(call):
            return None

        call_type = call_type_for(call, self._subscriber.friends)
        call_type.register_duration(call.duration, self)

        cost = price_call(call, call_type, self._promotions)
        self._total_amount += cost
        return cost

    def summarize(self) -> CallSummary:
        """Snapshot of the totals so far. Does not reset anything."""

        return CallSummary(
            total_amount=self._total_amount,
            durations=CallDurationTotals(
                total_national_seconds=self._national_seconds,
                total_international_seconds=self._international_seconds,
                total_interplanetary_seconds=self._interplanetary_seconds,
                total_friends_seconds=self._friends_seconds,
            ),
        )

    def _should_skip(self, call: Call) -> bool:
        made_by_other_line = call.source_phone != self._subscriber.phone_number
        outside_billing_period = not self._billing_period.contains(call.timestamp)
        return made_by_other_line or outside_billing_period

    # DurationRegisterer

    def register_friend_call(self, duration: int) -> None:
        self._friends_seconds += duration

    def register_national_call(self, duration: int) -> None:
        self._national_seconds += duration

    def register_international_call(self, duration: int) -> None:
        self._international_seconds += duration

    def register_interplanetary_call(self, duration: int) -> None:
        self._interplanetary_seconds += duration


__all__ = [
    "CallDurationTotals",
    "CallProcessor",
    "CallSummary",
]
