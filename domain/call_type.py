"""
Domain: Call classification and base pricing.

Contract excerpts implemented here:
- A call is National when source and destination share the country code.
- A call to a different country code starting with "0" is Interplanetary.
- Any other call is International.
- A call whose destination is in the subscriber's friend set is additionally a
  friend call. Friend status wraps the base category; it never replaces it.

Base prices (before promotions):
- National: flat 2.5
- International: 1.0 per second
- Interplanetary: 10.0 per second

Each category is a CallType variant.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Protocol

from .call import Call
from .phone_number import country_code

NATIONAL_CALL_COST = 2.5
INTERNATIONAL_COST_PER_SECOND = 1.0
INTERPLANETARY_COST_PER_SECOND = 10.0

INTERPLANETARY_CODE_PREFIX = "0"


class CallCategory(str, Enum):
    NATIONAL = "National"
    INTERNATIONAL = "International"
    INTERPLANETARY = "Interplanetary"


class Characteristic(str, Enum):
    """A characteristic of a call, orthogonal to its category."""

    TO_FRIEND = "to_friend"
    INTERNATIONAL = "international"


class DurationRegisterer(Protocol):
    """Knows where to accumulate the duration of each kind of call."""

    def register_friend_call(self, duration: int) -> None: ...

    def register_national_call(self, duration: int) -> None: ...

    def register_international_call(self, duration: int) -> None: ...

    def register_interplanetary_call(self, duration: int) -> None: ...


class CallType(ABC):
    @property
    @abstractmethod
    def category(self) -> CallCategory:
        """Base category of the call."""

    @abstractmethod
    def base_cost(self) -> float:
        """Cost of the call before any promotion."""

    @abstractmethod
    def register_duration(self, duration: int, registerer: DurationRegisterer) -> None:
        """Hand the call duration to every bucket it counts towards."""

    def has_characteristic(self, characteristic: Characteristic) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class NationalCall(CallType):
    @property
    def category(self) -> CallCategory:
        return CallCategory.NATIONAL

    def base_cost(self) -> float:
        return NATIONAL_CALL_COST

    def register_duration(self, duration: int, registerer: DurationRegisterer) -> None:
        registerer.register_national_call(duration)


@dataclass(frozen=True, slots=True)
class InternationalCall(CallType):
    duration_seconds: int

    @property
    def category(self) -> CallCategory:
        return CallCategory.INTERNATIONAL

    def base_cost(self) -> float:
        return INTERNATIONAL_COST_PER_SECOND * self.duration_seconds

    def register_duration(self, duration: int, registerer: DurationRegisterer) -> None:
        registerer.register_international_call(duration)

    def has_characteristic(self, characteristic: Characteristic) -> bool:
        return characteristic == Characteristic.INTERNATIONAL


@dataclass(frozen=True, slots=True)
class InterplanetaryCall(CallType):
    duration_seconds: int

    @property
    def category(self) -> CallCategory:
        return CallCategory.INTERPLANETARY

    def base_cost(self) -> float:
        return INTERPLANETARY_COST_PER_SECOND * self.duration_seconds

    def register_duration(self, duration: int, registerer: DurationRegisterer) -> None:
        registerer.register_interplanetary_call(duration)


@dataclass(frozen=True, slots=True)
class FriendCall(CallType):
    """
    A call to a friend. Wraps the base category of the call.

    Pricing is the wrapped category's price; only promotions make friend
    calls cheaper. Durations are registered twice: once as a friend call and
    once for the wrapped category.
    """

    subtype: CallType

    @property
    def category(self) -> CallCategory:
        return self.subtype.category

    def base_cost(self) -> float:
        return self.subtype.base_cost()

    def register_duration(self, duration: int, registerer: DurationRegisterer) -> None:
        registerer.register_friend_call(duration)
        self.subtype.register_duration(duration, registerer)

    def has_characteristic(self, characteristic: Characteristic) -> bool:
        if characteristic == Characteristic.TO_FRIEND:
            return True
        return self.subtype.has_characteristic(characteristic)


@dataclass(frozen=True, slots=True)
class CallClassification:
    category: CallCategory
    is_friend: bool


def base_call_type(call: Call) -> CallType:
    """Resolve the category variant of a call, ignoring friend status."""

    source_country = country_code(call.source_phone)
    destination_country = country_code(call.destination_phone)

    if source_country == destination_country:
        return NationalCall()

    if destination_country.startswith(INTERPLANETARY_CODE_PREFIX):
        return InterplanetaryCall(duration_seconds=call.duration)

    return InternationalCall(duration_seconds=call.duration)


def call_type_for(call: Call, friends: AbstractSet[str]) -> CallType:
    """Resolve the full call type, wrapping it in FriendCall when applicable."""

    base = base_call_type(call)
    if call.destination_phone in friends:
        return FriendCall(subtype=base)
    return base


def classify_call(call: Call, friends: AbstractSet[str]) -> CallClassification:
    """
    Classify a call as (category, is_friend).

    Deterministic: depends only on the call and the friend set.

    Examples:
        >>> from datetime import datetime, timezone
        >>> c = Call("+5491167980953", "+5491167950940", 60, datetime(2022, 1, 2, tzinfo=timezone.utc))
        >>> classify_call(c, {"+5491167980953"})
        CallClassification(category=<CallCategory.NATIONAL: 'National'>, is_friend=True)
    """

    call_type = call_type_for(call, friends)
    return CallClassification(
        category=call_type.category,
        is_friend=call_type.has_characteristic(Characteristic.TO_FRIEND),
    )
