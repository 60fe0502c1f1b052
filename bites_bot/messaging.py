"""
WhatsApp messaging via Twilio.

Sends replies through the Twilio Messages API when configured, falls back to
logging in mock mode so the bot can run locally without credentials.

Environment variables:
- TWILIO_ACCOUNT_SID: Twilio Account SID (starts with AC)
- TWILIO_AUTH_TOKEN: Twilio Auth Token
- TWILIO_WHATSAPP_NUMBER: Sender, e.g. "whatsapp:+14155238886"

The Twilio client is synchronous; async callers should run ``send`` in a
thread pool. Its HTTP requests are bounded by EXTERNAL_CALL_TIMEOUT_SECONDS,
so a send either completes or raises; callers never abandon one mid-flight.
"""

import logging
from typing import Any, Dict, Optional

from . import config

logger = logging.getLogger(__name__)


def is_twilio_configured() -> bool:
    """Check if Twilio is properly configured."""
    return all([config.TWILIO_ACCOUNT_SID, config.TWILIO_AUTH_TOKEN, config.TWILIO_WHATSAPP_NUMBER])


def to_whatsapp_address(number: str) -> str:
    """
    Make sure a number carries the ``whatsapp:`` channel prefix.

    Examples:
        "+17325550101" -> "whatsapp:+17325550101"
        "whatsapp:+17325550101" -> "whatsapp:+17325550101"
    """
    number = number.strip()
    if number.startswith("whatsapp:"):
        return number
    return f"whatsapp:{number}"


class TwilioMessenger:
    """Outbound WhatsApp sender."""

    def __init__(self, client: Any = None):
        self._client = client
        self.mock = client is None and not is_twilio_configured()

    @property
    def client(self):
        if self._client is None:
            from twilio.http.http_client import TwilioHttpClient
            from twilio.rest import Client
            self._client = Client(
                config.TWILIO_ACCOUNT_SID,
                config.TWILIO_AUTH_TOKEN,
                http_client=TwilioHttpClient(timeout=config.EXTERNAL_CALL_TIMEOUT_SECONDS),
            )
        return self._client

    def send(self, to: str, body: str, media_url: Optional[str] = None) -> Dict[str, Any]:
        """
        Send a text message, optionally with one media attachment.

        Args:
            to: Recipient, with or without the "whatsapp:" prefix
            body: Message text
            media_url: Public URL of an attachment (voice reply)

        Returns:
            dict with status, recipient, and message SID when sent for real

        Raises:
            twilio.base.exceptions.TwilioRestException: If Twilio rejects the message
        """
        recipient = to_whatsapp_address(to)

        if self.mock:
            logger.info("MOCK WhatsApp message (%d chars, media=%s)", len(body), bool(media_url))
            logger.debug("MOCK WhatsApp to %s: %s", recipient, body)
            return {"status": "sent", "to": recipient, "mock": True}

        params: Dict[str, Any] = {
            "from_": to_whatsapp_address(config.TWILIO_WHATSAPP_NUMBER),
            "to": recipient,
            "body": body,
        }
        if media_url:
            params["media_url"] = [media_url]

        message = self.client.messages.create(**params)
        logger.info("WhatsApp message sent (SID: %s)", message.sid)
        return {"status": "sent", "to": recipient, "mock": False, "message_sid": message.sid}
