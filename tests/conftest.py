"""
Pytest configuration for invoice generator tests.

This file adds the project root to the Python path so that tests can import
the domain, services, repositories, scripts and api packages, and provides the
subscriber and billing period shared by most tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add the project root to the Python path
# so tests can import domain, services, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.subscriber import Subscriber  # noqa: E402
from domain.time import BillingPeriod  # noqa: E402

SUBSCRIBER_PHONE = "+5491111111111"
NATIONAL_FRIEND_PHONE = "+5491111111113"
INTERNATIONAL_FRIEND_PHONE = "+1991111111113"

IN_PERIOD = datetime(2022, 9, 5, 20, 52, 44, tzinfo=timezone.utc)
OUTSIDE_PERIOD = datetime(2023, 9, 5, 20, 52, 44, tzinfo=timezone.utc)


@pytest.fixture
def subscriber() -> Subscriber:
    return Subscriber(
        name="Antonio Banderas",
        address="Calle Falsa 123",
        phone_number=SUBSCRIBER_PHONE,
        friends=frozenset({NATIONAL_FRIEND_PHONE, INTERNATIONAL_FRIEND_PHONE}),
    )


@pytest.fixture
def billing_period() -> BillingPeriod:
    return BillingPeriod(
        start=datetime(2022, 1, 1, tzinfo=timezone.utc),
        end=datetime(2022, 12, 31, tzinfo=timezone.utc),
    )
