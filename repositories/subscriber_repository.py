"""
Subscriber repository.

Looks up telephone line subscribers by phone number in the remote users
service:

    GET {USERS_API_URL}/users/{phone_number}

    {
        "name": "Hosea Nitzsche",
        "address": "77826 Jaime Mews",
        "phone_number": "+5491167980952",
        "friends": ["+5491167980953", "+5491167980951", "+191167980953"]
    }
"""

from __future__ import annotations

import logging
from typing import Dict, List, Protocol
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from domain.subscriber import Subscriber

logger = logging.getLogger(__name__)


class SubscriberNotFoundError(LookupError):
    """Raised when no subscriber owns the requested phone number."""

    def __init__(self, phone_number: str) -> None:
        self.phone_number = phone_number
        super().__init__(f"user not found: {phone_number}")


class SubscriberLookupError(RuntimeError):
    """Raised when the users service fails or answers something unusable."""


class SubscriberFinder(Protocol):
    def find_by_phone(self, phone_number: str) -> Subscriber: ...


class SubscriberPayload(BaseModel):
    """Body returned by the users service."""

    model_config = ConfigDict(extra="ignore")

    name: str
    address: str
    phone_number: str
    friends: List[str] = Field(default_factory=list)

    def to_subscriber(self) -> Subscriber:
        return Subscriber(
            name=self.name,
            address=self.address,
            phone_number=self.phone_number,
            friends=frozenset(self.friends),
        )


class HttpSubscriberFinder:
    """
    SubscriberFinder backed by the users service.

    The httpx client is injected so callers control timeouts and transports;
    see repositories.client.create_http_client().
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def find_by_phone(self, phone_number: str) -> Subscriber:
        path = f"/users/{quote(phone_number, safe='+')}"

        try:
            response = self._client.get(path)
        except httpx.HTTPError as e:
            logger.warning(
                "Users service request failed",
                extra={"phone_number": phone_number, "error": str(e)},
            )
            raise SubscriberLookupError(f"http get: {e}") from e

        if response.status_code == httpx.codes.NOT_FOUND:
            raise SubscriberNotFoundError(phone_number)

        if response.status_code != httpx.codes.OK:
            logger.warning(
                "Users service answered with unexpected status",
                extra={"phone_number": phone_number, "status_code": response.status_code},
            )
            raise SubscriberLookupError(
                f"unexpected status code ({response.status_code}) expected 200 OK"
            )

        try:
            payload = SubscriberPayload.model_validate_json(response.content)
        except ValidationError as e:
            raise SubscriberLookupError(f"parsing body: {e}") from e

        logger.debug(
            "Subscriber found",
            extra={"phone_number": phone_number, "friends": len(payload.friends)},
        )
        return payload.to_subscriber()


class InMemorySubscriberFinder:
    """SubscriberFinder over a fixed set of subscribers, keyed by phone number."""

    def __init__(self, *subscribers: Subscriber) -> None:
        self._subscribers: Dict[str, Subscriber] = {
            subscriber.phone_number: subscriber for subscriber in subscribers
        }

    def find_by_phone(self, phone_number: str) -> Subscriber:
        subscriber = self._subscribers.get(phone_number)
        if subscriber is None:
            raise SubscriberNotFoundError(phone_number)
        return subscriber


__all__ = [
    "HttpSubscriberFinder",
    "InMemorySubscriberFinder",
    "SubscriberFinder",
    "SubscriberLookupError",
    "SubscriberNotFoundError",
    "SubscriberPayload",
]
