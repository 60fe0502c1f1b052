"""
Chat Routes
===========

JSON counterpart of the WhatsApp webhook. The message goes through the same
MessageProcessor (normalization, interpreter, per-user locking), but the
reply is returned in the response instead of being sent through Twilio.

Endpoints:
----------
- POST /chat/message: Send a message, get the reply and the current cart

Voice Transcripts:
------------------
Set ``voice`` to true to submit already-transcribed speech. The transcript is
normalized the same way a WhatsApp voice note is ("I want two cokes" becomes
"add DR1 2") and the user is marked as preferring voice replies.

Rate Limiting:
--------------
Shares the webhook limit (default: 30/minute per client address).
"""

import logging

from fastapi import APIRouter, Depends, Request

from ..config import get_rate_limit_webhook
from ..dependencies import get_processor
from ..message_processor import MessageProcessor
from ..middleware import limiter
from ..state import round_money
from ..schemas.chat import CartLineOut, ChatMessageRequest, ChatMessageResponse


logger = logging.getLogger(__name__)

# Router definition
chat_router = APIRouter(prefix="/chat", tags=["Chat"])


@chat_router.post("/message", response_model=ChatMessageResponse)
@limiter.limit(get_rate_limit_webhook)
async def chat_message(
    request: Request,
    req: ChatMessageRequest,
    processor: MessageProcessor = Depends(get_processor),
) -> ChatMessageResponse:
    """
    Run one message through the bot and return the reply.

    The user's voice preference is updated for transcripts, but nothing is
    sent through the messenger.
    """
    if req.voice:
        processor.mark_voice_preferred(req.user_id)

    result = await processor.process_text(req.user_id, req.message, was_voice=req.voice, deliver=False)

    session = result.session
    order_id = result.order.order_id if result.order else None
    return ChatMessageResponse(
        reply=result.reply,
        intent=result.intent,
        command=result.command,
        cart=[CartLineOut.from_line(line) for line in session.cart] if session else [],
        cart_total=float(round_money(session.cart_total)) if session else 0.0,
        order_id=order_id,
    )
