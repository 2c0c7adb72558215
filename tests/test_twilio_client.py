from __future__ import annotations

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError, ReadTimeout
from twilio.base.exceptions import TwilioRestException

from sms_relay.sms import ERROR_MESSAGES, user_facing_error
from sms_relay.twilio_client import ProviderError

from .fakes import FakeMessages, twilio_provider


def test_send_message_returns_sid() -> None:
    messages = FakeMessages()

    sid = twilio_provider(messages).send_message("+15551234567", "+15550001111", "hi")

    assert sid == "SM456"
    assert messages.created == [{"to": "+15551234567", "from_": "+15550001111", "body": "hi"}]


def test_rest_exception_becomes_provider_error() -> None:
    messages = FakeMessages(
        error=TwilioRestException(400, "/Messages.json", msg="Invalid 'To' number", code=21211)
    )

    with pytest.raises(ProviderError) as excinfo:
        twilio_provider(messages).send_message("123", "+15550001111", "hi")

    assert excinfo.value.code == 21211
    assert excinfo.value.message == "Invalid 'To' number"
    assert str(excinfo.value) == "Invalid 'To' number"


@pytest.mark.parametrize(
    "error",
    [
        RequestsConnectionError("Failed to establish a new connection: [Errno 111] Connection refused"),
        ReadTimeout("Read timed out. (read timeout=10)"),
    ],
)
def test_transport_failure_becomes_provider_error(error: Exception) -> None:
    messages = FakeMessages(error=error)

    with pytest.raises(ProviderError) as excinfo:
        twilio_provider(messages).send_message("+15551234567", "+15550001111", "hi")

    assert excinfo.value.code is None
    assert excinfo.value.message == str(error)
    assert excinfo.value.__cause__ is error


def test_user_facing_error_mapping() -> None:
    assert user_facing_error(21211, "raw") == ERROR_MESSAGES[21211]
    assert user_facing_error(20003, "Authenticate") == "Authenticate"
    assert user_facing_error(None, "boom") == "boom"
    assert user_facing_error(None, "") == "Failed to send SMS."
