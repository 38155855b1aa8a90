"""Exceptions raised by the client and caught by the CLI."""

import json
from typing import Any


class HtbError(Exception):
    """Base class for every error this package raises on purpose."""


class MissingSettingError(HtbError):
    """Raised when a required environment variable is unset."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"You must define {name}!")


class TransportError(HtbError):
    """Raised when a request fails on the wire or the body is not JSON."""


class ApiError(HtbError):
    """Raised when the response envelope lacks the expected keys.

    ``str(error)`` is the envelope pretty-printed, or the API's own message
    when one was given.
    """

    def __init__(self, envelope: Any, message: str | None = None) -> None:
        self.envelope = envelope
        super().__init__(message if message is not None else pretty(envelope))


class LabPathError(HtbError):
    """Raised when a lab directory cannot be used or created."""


def pretty(value: Any) -> str:
    """Render a decoded JSON value with 4-space indentation."""
    return json.dumps(value, indent=4, ensure_ascii=False)
