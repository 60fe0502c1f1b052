"""
WhatsApp Webhook Route
======================

Twilio calls this endpoint for every inbound WhatsApp message. The reply is
not returned in the HTTP response; it is sent back through the Twilio REST
API (as text or as a synthesized voice note) by the MessageProcessor.

Endpoints:
----------
- POST /webhook: Inbound WhatsApp message (form-encoded)

Twilio Form Fields:
-------------------
- From: Sender address, e.g. "whatsapp:+15551234567"
- Body: Message text (may be empty for media messages)
- MediaUrl0: URL of the first attachment, if any
- MediaContentType0: MIME type of the first attachment, e.g. "audio/ogg"

A message is treated as voice when MediaUrl0 is set and MediaContentType0
starts with "audio/".

Responses:
----------
- 200 "OK": Message handled. Failures to deliver the reply are logged but
  still answered with 200, since Twilio retrying would not help.
- 400: Missing sender
- 429: Rate limited
- 500 "Error": Unexpected failure while processing
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import PlainTextResponse

from ..config import get_rate_limit_webhook
from ..dependencies import get_processor
from ..message_processor import InboundMessage, MessageProcessor
from ..middleware import limiter


logger = logging.getLogger(__name__)

# Router definition
webhook_router = APIRouter(tags=["Webhook"])


@webhook_router.post("/webhook", response_class=PlainTextResponse)
@limiter.limit(get_rate_limit_webhook)
async def whatsapp_webhook(
    request: Request,
    From: str = Form(""),
    Body: str = Form(""),
    MediaUrl0: Optional[str] = Form(None),
    MediaContentType0: Optional[str] = Form(None),
    processor: MessageProcessor = Depends(get_processor),
) -> PlainTextResponse:
    """
    Handle one inbound WhatsApp message.

    The reply is sent through the messenger; the HTTP body is a bare
    acknowledgement for Twilio.
    """
    if not From:
        raise HTTPException(status_code=400, detail="Missing sender")

    inbound = InboundMessage(
        sender_id=From,
        text=Body or "",
        media_url=MediaUrl0 or None,
        media_type=MediaContentType0 or None,
    )
    logger.debug("Webhook message (voice=%s)", inbound.is_voice)

    try:
        result = await processor.process(inbound)
    except Exception:
        logger.exception("Unhandled error processing webhook message")
        return PlainTextResponse("Error", status_code=500)

    logger.info("Handled %s message, intent=%s, delivery=%s",
                "voice" if result.was_voice else "text", result.intent, result.delivery)
    return PlainTextResponse("OK")
