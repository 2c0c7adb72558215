from __future__ import annotations

import logging
from typing import Protocol

from requests.exceptions import RequestException
from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.rest import Client

from .config import Settings

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """A failed send, as reported by the SMS provider."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class SmsProvider(Protocol):
    def send_message(self, to: str, from_: str, body: str) -> str:
        """Send one SMS and return the provider's message id."""
        ...


class TwilioProvider:
    def __init__(self, account_sid: str, auth_token: str, client: Client | None = None) -> None:
        self.client = client if client is not None else Client(account_sid, auth_token)

    def send_message(self, to: str, from_: str, body: str) -> str:
        try:
            message = self.client.messages.create(to=to, from_=from_, body=body)
        except TwilioRestException as e:
            raise ProviderError(e.msg, code=e.code) from e
        except TwilioException as e:
            raise ProviderError(str(e)) from e
        except RequestException as e:
            # Twilio's HTTP client does not wrap transport failures.
            raise ProviderError(str(e) or type(e).__name__) from e
        return message.sid


def build_provider(settings: Settings) -> TwilioProvider:
    provider = TwilioProvider(settings.account_sid, settings.auth_token)
    logger.info("Twilio client initialized for %s", settings.phone_number)
    return provider
