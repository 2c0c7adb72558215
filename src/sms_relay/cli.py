from __future__ import annotations

import logging

import uvicorn

from .config import load_settings_or_exit
from .logging_setup import setup_logging
from .main import create_app
from .twilio_client import build_provider

logger = logging.getLogger(__name__)


def main() -> None:
    """
    Run the relay server.

    Configuration is checked before anything else; with missing Twilio
    credentials the process exits with status 1 and never binds a port.
    """
    settings = load_settings_or_exit()
    setup_logging(settings.log_level, settings.log_format)

    provider = build_provider(settings)
    app = create_app(settings=settings, provider=provider)

    logger.info("Server is running on http://localhost:%d", settings.port)
    logger.info(
        "Twilio webhook for incoming SMS should be set to: "
        "http://<your-ngrok-or-public-url>/sms"
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
