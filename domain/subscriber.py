"""
Domain: Subscriber (telephone line owner).

Subscribers are owned by the external users service; the invoice engine only
reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet


@dataclass(frozen=True, slots=True)
class Subscriber:
    """
    Telephone line subscriber with their friend list.

    friends is a set: order and duplicates carry no meaning.
    """

    name: str
    address: str
    phone_number: str
    friends: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.friends, frozenset):
            object.__setattr__(self, "friends", frozenset(self.friends))

    def is_friend(self, phone_number: str) -> bool:
        return phone_number in self.friends
