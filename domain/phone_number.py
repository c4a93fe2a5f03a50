"""
Domain: Phone numbers.

Accepted format is a leading "+" followed by 12 or 13 digits, for example
+5491167950940. The first two digits after the "+" are the country code.

Everything here is pure: the pattern is compiled once and never mutated.
"""

from __future__ import annotations

import re
from typing import Optional

PHONE_NUMBER_FORMAT = re.compile(r"\+[0-9]{12,13}")


class InvalidPhoneNumberError(ValueError):
    """
    Raised when a phone number does not match PHONE_NUMBER_FORMAT.

    field names the role of the number ("source phone", "destination phone")
    when the caller knows it.
    """

    def __init__(self, phone_number: str, field: Optional[str] = None) -> None:
        self.phone_number = phone_number
        self.field = field
        message = f"invalid format {phone_number!r}, should match {PHONE_NUMBER_FORMAT.pattern}"
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


def is_valid_phone_number(phone_number: str) -> bool:
    return PHONE_NUMBER_FORMAT.fullmatch(phone_number) is not None


def validate_phone_number(phone_number: str, field: Optional[str] = None) -> None:
    if not is_valid_phone_number(phone_number):
        raise InvalidPhoneNumberError(phone_number, field)


def country_code(phone_number: str) -> str:
    """
    Extract the two digit country code of a phone number.

    +549XXXXXXXXXX -> "54"

    Raises InvalidPhoneNumberError instead of slicing a malformed number.
    """

    validate_phone_number(phone_number)
    return phone_number[1:3]
