"""
Domain: Promotions.

A promotion may override the base cost of a call. Promotions are evaluated in
a fixed order and the first one whose applies_to() returns True prices the
call; if none applies the call is charged its base cost.

Contract excerpts implemented here:
- applies_to() never mutates promotion state; it may be asked repeatedly.
- apply() is where counters move.
- Promotion state lives for one invoice run only: build a fresh list with
  default_promotions() for each run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import FrozenSet, List, Sequence

from .call import Call
from .call_type import CallType, Characteristic, base_call_type, call_type_for
from .phone_number import country_code
from .subscriber import Subscriber

MAX_FREE_CALLS_TO_FRIENDS = 10

MERCOSUR_COUNTRY_CODES: FrozenSet[str] = frozenset({"54", "60", "12"})
MERCOSUR_DISCOUNT = 0.5


class Promotion(ABC):
    @abstractmethod
    def applies_to(self, call: Call) -> bool:
        """Return whether the promotion applies to the call. Must not mutate state."""

    @abstractmethod
    def apply(self, call: Call) -> float:
        """Apply the promotion to the call, returning its final cost."""


class FreeFriendCallsPromotion(Promotion):
    """
    The first max_free_calls calls to friends are free.

    Once the allowance is used up, friend calls are charged like any other call
    of their category.
    """

    def __init__(self, subscriber: Subscriber, max_free_calls: int = MAX_FREE_CALLS_TO_FRIENDS) -> None:
        if max_free_calls < 0:
            raise ValueError("max_free_calls must be >= 0")
        self._subscriber = subscriber
        self._max_free_calls = max_free_calls
        self._granted = 0

    @property
    def granted(self) -> int:
        return self._granted

    @property
    def remaining(self) -> int:
        return self._max_free_calls - self._granted

    def applies_to(self, call: Call) -> bool:
        is_call_to_friend = call_type_for(call, self._subscriber.friends).has_characteristic(
            Characteristic.TO_FRIEND
        )
        return is_call_to_friend and self._granted < self._max_free_calls

    def apply(self, call: Call) -> float:
        self._granted += 1
        return 0.0


class MercosurDiscountPromotion(Promotion):
    """International calls to Mercosur countries cost a fraction of their base price."""

    def __init__(
        self,
        country_codes: FrozenSet[str] = MERCOSUR_COUNTRY_CODES,
        discount: float = MERCOSUR_DISCOUNT,
    ) -> None:
        if not 0 <= discount <= 1:
            raise ValueError("discount must be between 0 and 1")
        self._country_codes = frozenset(country_codes)
        self._discount = discount

    def applies_to(self, call: Call) -> bool:
        is_international = base_call_type(call).has_characteristic(Characteristic.INTERNATIONAL)
        return is_international and country_code(call.destination_phone) in self._country_codes

    def apply(self, call: Call) -> float:
        return base_call_type(call).base_cost() * (1 - self._discount)


def default_promotions(subscriber: Subscriber) -> List[Promotion]:
    """
    Canonical promotion order for an invoice run.

    Free friend calls go first: they are tied to the subscriber's relationships
    and must win over the country discount.
    """

    return [
        FreeFriendCallsPromotion(subscriber),
        MercosurDiscountPromotion(),
    ]


def price_call(call: Call, call_type: CallType, promotions: Sequence[Promotion]) -> float:
    """First applicable promotion prices the call; otherwise its base cost."""

    for promotion in promotions:
        if promotion.applies_to(call):
            return promotion.apply(call)

    return call_type.base_cost()
