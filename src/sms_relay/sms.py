from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum
from typing import Any, Final

from pydantic import BaseModel

MISSING_FIELDS_ERROR: Final[str] = "Recipient phone number and message are required."
SEND_OK_MESSAGE: Final[str] = "SMS sent successfully!"
GENERIC_SEND_ERROR: Final[str] = "Failed to send SMS."


class TwilioErrorCode(IntEnum):
    # https://www.twilio.com/docs/api/errors/21211
    INVALID_TO_NUMBER = 21211


ERROR_MESSAGES: Final[Mapping[int, str]] = {
    TwilioErrorCode.INVALID_TO_NUMBER: (
        "Invalid recipient phone number. Please ensure it includes the "
        "country code (e.g., +1234567890)."
    ),
}


class SendRequest(BaseModel):
    to: str
    message: str

    @classmethod
    def from_payload(cls, payload: Any) -> SendRequest | None:
        """
        Return a SendRequest if `payload` carries non-empty `to` and `message`
        strings, otherwise None.
        """
        if not isinstance(payload, Mapping):
            return None
        to = payload.get("to")
        message = payload.get("message")
        if not isinstance(to, str) or not isinstance(message, str):
            return None
        if not to or not message:
            return None
        return cls(to=to, message=message)


class SendSuccess(BaseModel):
    success: bool = True
    message: str = SEND_OK_MESSAGE
    sid: str


class SendFailure(BaseModel):
    success: bool = False
    error: str
    details: str | None = None


def user_facing_error(code: int | None, message: str) -> str:
    """
    Map a provider error to the text shown to the user.

    Known codes get a friendlier message; otherwise the provider's own message
    is passed through.
    """
    if code is not None and code in ERROR_MESSAGES:
        return ERROR_MESSAGES[code]
    return message or GENERIC_SEND_ERROR
