"""
Users service HTTP client initialization.

This module contains *only* the connection setup for the remote users service
and exposes `create_http_client()` for repository modules to use.

Environment variables (optional, read from the process or a .env file):
- USERS_API_URL: Base URL of the users service
- USERS_API_TIMEOUT_SECONDS: Request timeout in seconds
"""

from __future__ import annotations

import os
from pathlib import Path

import httpx
from dotenv import load_dotenv

DEFAULT_USERS_API_URL = "https://interview-brubank-api.herokuapp.com"
DEFAULT_USERS_API_TIMEOUT_SECONDS = 10.0

# Load environment variables from .env file
# Look for .env in the project root directory
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def get_users_api_url() -> str:
    return (os.getenv("USERS_API_URL") or DEFAULT_USERS_API_URL).rstrip("/")


def get_users_api_timeout() -> float:
    raw = os.getenv("USERS_API_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_USERS_API_TIMEOUT_SECONDS

    try:
        timeout = float(raw)
    except ValueError:
        raise RuntimeError(
            f"Invalid environment variable: USERS_API_TIMEOUT_SECONDS={raw!r}. "
            "Set it to a number of seconds."
        ) from None

    if timeout <= 0:
        raise RuntimeError("USERS_API_TIMEOUT_SECONDS must be greater than 0")

    return timeout


def create_http_client() -> httpx.Client:
    """HTTP client for the users service. Callers own it and must close it."""

    return httpx.Client(
        base_url=get_users_api_url(),
        timeout=get_users_api_timeout(),
        headers={"Accept": "application/json"},
    )


__all__ = [
    "DEFAULT_USERS_API_URL",
    "create_http_client",
    "get_users_api_timeout",
    "get_users_api_url",
]
