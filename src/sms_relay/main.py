from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from twilio.twiml.messaging_response import MessagingResponse

from .config import Settings, get_settings
from .sms import (
    MISSING_FIELDS_ERROR,
    SendFailure,
    SendRequest,
    SendSuccess,
    user_facing_error,
)
from .twilio_client import ProviderError, SmsProvider, build_provider

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


# --- Dependencies ---


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_provider(request: Request) -> SmsProvider:
    return request.app.state.provider


async def _read_payload(request: Request) -> Any:
    """
    Read the send request body as a plain mapping.

    JSON is the normal case; form-encoded bodies are accepted as well.
    Unparseable JSON or form data yields None so the caller reports missing fields.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        try:
            form = await request.form()
        except (HTTPException, MultiPartException):
            return None
        return dict(form)
    try:
        return await request.json()
    except ValueError:
        return None


# --- Routes ---


def create_app(settings: Settings | None = None, provider: SmsProvider | None = None) -> FastAPI:
    """
    Build the application around one long-lived provider client.

    Without arguments, settings come from the environment (exiting the process
    if credentials are missing) and a real Twilio client is constructed.
    """
    if settings is None:
        settings = get_settings()
    if provider is None:
        provider = build_provider(settings)

    app = FastAPI(title="sms-relay", version="0.1.0")
    app.state.settings = settings
    app.state.provider = provider

    public_dir = settings.public_dir

    @app.get("/")
    def index() -> FileResponse:
        """Front-end entry page: a small form that posts to /api/send."""
        return FileResponse(public_dir / "index.html")

    @app.post("/api/send")
    async def send_sms(
        request: Request,
        settings: Settings = Depends(get_app_settings),
        provider: SmsProvider = Depends(get_provider),
    ) -> JSONResponse:
        """
        Send one SMS through the provider.

        Accepts JSON (or form data):

          { "to": "+15551234567", "message": "hi" }
        """
        send_request = SendRequest.from_payload(await _read_payload(request))
        if send_request is None:
            return JSONResponse(
                SendFailure(error=MISSING_FIELDS_ERROR).model_dump(exclude_none=True),
                status_code=400,
            )

        try:
            # Blocking HTTP call to Twilio; keep it off the event loop.
            sid = await run_in_threadpool(
                provider.send_message,
                send_request.to,
                settings.phone_number,
                send_request.message,
            )
        except ProviderError as e:
            logger.error("Error sending SMS: %s", e.message)
            failure = SendFailure(error=user_facing_error(e.code, e.message), details=e.message)
            return JSONResponse(failure.model_dump(), status_code=500)

        logger.info("SMS sent successfully. SID: %s", sid)
        return JSONResponse(SendSuccess(sid=sid).model_dump())

    @app.post("/sms")
    async def sms_webhook(request: Request) -> Response:
        """
        Twilio inbound SMS webhook.

        Logs the message and always returns empty TwiML, which acknowledges
        receipt without sending a reply. A body that cannot be parsed is
        logged and acknowledged the same way.
        """
        twiml = MessagingResponse()
        try:
            form = await request.form()
        except (HTTPException, MultiPartException) as e:
            logger.warning("Unparseable webhook body: %s", getattr(e, "detail", e))
            return Response(content=str(twiml), media_type="text/xml")

        from_number = form.get("From", "")
        body = form.get("Body", "")
        logger.info(
            "Incoming SMS from %s: %s",
            from_number,
            body,
            extra={"fields": {"from": from_number, "message_sid": form.get("MessageSid", "")}},
        )
        return Response(content=str(twiml), media_type="text/xml")

    # Everything else under / is a static file. Mounted last so the routes
    # above take precedence.
    app.mount("/", StaticFiles(directory=public_dir), name="public")

    return app
