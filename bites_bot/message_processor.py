"""
Unified message processing for all inbound channels.

This module provides a single MessageProcessor class that handles the complete
lifecycle of one inbound message:
- Voice notes: download and transcribe (apology on failure)
- Empty input: prompt the user, interpreter not invoked
- Command normalization and interpretation under the per-user lock
- Reply delivery as synthesized voice or text, with text fallback

The Twilio webhook and the JSON chat endpoint both use this class; only the
request/response format handling lives in the routes.

Every external call (download, transcription, synthesis, delivery) is bounded
by ``timeout`` seconds. None of their failures propagate: they are logged and
the user gets a text reply or an apology instead.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from fastapi.concurrency import run_in_threadpool

from . import config, formatting
from .commands import CommandInterpreter
from .menu import MenuCatalog
from .messaging import TwilioMessenger
from .normalizer import normalize_command
from .state import ChatSession, Order
from .stores import OrderStore, SessionStore
from .transcription import BaseTranscriber, TranscriptionError, download_media
from .tts import AudioStore, BaseTTSProvider

logger = logging.getLogger(__name__)


# Delivery outcomes
DELIVERED_TEXT = "text"
DELIVERED_VOICE = "voice"
DELIVERY_FAILED = "failed"
DELIVERY_SKIPPED = "skipped"


# -----------------------------------------------------------------------------
# Data Classes
# -----------------------------------------------------------------------------

@dataclass
class InboundMessage:
    """A message as received from the messaging platform."""
    sender_id: str
    text: str = ""
    media_url: Optional[str] = None
    media_type: Optional[str] = None

    @property
    def is_voice(self) -> bool:
        return bool(self.media_url) and (self.media_type or "").startswith("audio/")


@dataclass
class ProcessingResult:
    """Output from message processing."""
    reply: str
    intent: str
    was_voice: bool = False
    command: Optional[str] = None
    order: Optional[Order] = None
    delivery: str = DELIVERY_SKIPPED
    session: Optional[ChatSession] = None


# -----------------------------------------------------------------------------
# MessageProcessor Class
# -----------------------------------------------------------------------------

class MessageProcessor:
    """
    Runs one inbound message through transcription, normalization,
    interpretation, and delivery.

    Usage:
        processor = MessageProcessor(catalog, sessions, orders, messenger=TwilioMessenger())
        result = await processor.process(InboundMessage(sender_id="whatsapp:+1555...", text="menu"))
    """

    def __init__(
        self,
        catalog: MenuCatalog,
        sessions: SessionStore,
        orders: OrderStore,
        interpreter: Optional[CommandInterpreter] = None,
        messenger: Optional[TwilioMessenger] = None,
        transcriber: Optional[BaseTranscriber] = None,
        tts_provider: Optional[BaseTTSProvider] = None,
        audio_store: Optional[AudioStore] = None,
        media_downloader: Callable[[str], Awaitable[bytes]] = download_media,
        timeout: float = config.EXTERNAL_CALL_TIMEOUT_SECONDS,
        voice_reply_max_chars: int = config.VOICE_REPLY_MAX_CHARS,
    ):
        self.catalog = catalog
        self.sessions = sessions
        self.orders = orders
        self.interpreter = interpreter or CommandInterpreter(catalog, orders)
        self.messenger = messenger
        self.transcriber = transcriber
        self.tts_provider = tts_provider
        self.audio_store = audio_store
        self.media_downloader = media_downloader
        self.timeout = timeout
        self.voice_reply_max_chars = voice_reply_max_chars

    async def process(self, inbound: InboundMessage, deliver: bool = True) -> ProcessingResult:
        """
        Process one inbound message and (optionally) send the reply.

        Args:
            inbound: The message as received
            deliver: False to only compute the reply (JSON chat API)
        """
        sender = inbound.sender_id
        if not inbound.is_voice:
            return await self.process_text(sender, inbound.text, was_voice=False, deliver=deliver)

        session = self.mark_voice_preferred(sender)
        logger.info("Received voice message")
        try:
            text = await self._transcribe(inbound)
        except TranscriptionError as e:
            logger.error("Error processing voice message: %s", e)
            result = ProcessingResult(
                reply=formatting.VOICE_APOLOGY,
                intent="transcription_failed",
                was_voice=True,
                session=session,
            )
            if deliver:
                result.delivery = await self.deliver_reply(sender, result.reply, voice_preferred=False)
            return result

        logger.debug("Transcribed: %r", text)
        return await self.process_text(sender, text, was_voice=True, deliver=deliver)

    async def process_text(
        self,
        sender: str,
        text: Optional[str],
        was_voice: bool = False,
        deliver: bool = True,
    ) -> ProcessingResult:
        """
        Interpret ``text`` (typed, or a voice transcript) for ``sender``.

        Empty input is answered with a prompt without reaching the interpreter.
        """
        text = (text or "").strip().lower()
        if not text:
            session = self.sessions.get_or_create(sender)
            result = ProcessingResult(
                reply=formatting.EMPTY_MESSAGE_PROMPT,
                intent="empty",
                was_voice=was_voice,
                session=session,
            )
            if deliver:
                result.delivery = await self.deliver_reply(sender, result.reply, session.voice_preferred)
            return result

        command = normalize_command(text, was_voice, self.catalog)
        logger.debug("Processing command %r from %s", command, sender)

        with self.sessions.lock(sender):
            session = self.sessions.get_or_create(sender)
            outcome = self.interpreter.handle(session, command)
            self.sessions.save(session)

        result = ProcessingResult(
            reply=outcome.reply,
            intent=outcome.intent,
            was_voice=was_voice,
            command=command,
            order=outcome.order,
            session=session,
        )
        if deliver:
            result.delivery = await self.deliver_reply(sender, result.reply, session.voice_preferred)
        return result

    def mark_voice_preferred(self, sender: str) -> ChatSession:
        """Remember that ``sender`` talks to us by voice; replies become voice notes."""
        with self.sessions.lock(sender):
            session = self.sessions.get_or_create(sender)
            session.voice_preferred = True
            self.sessions.save(session)
        return session

    # -------------------------------------------------------------------------
    # External collaborators
    # -------------------------------------------------------------------------

    async def _transcribe(self, inbound: InboundMessage) -> str:
        if self.transcriber is None:
            raise TranscriptionError("No speech-to-text provider configured")
        try:
            audio = await asyncio.wait_for(self.media_downloader(inbound.media_url), self.timeout)
            text = await asyncio.wait_for(
                self.transcriber.transcribe(audio, inbound.media_type or "audio/ogg"),
                self.timeout,
            )
        except TranscriptionError:
            raise
        except asyncio.TimeoutError as e:
            raise TranscriptionError("Timed out fetching or transcribing audio") from e
        except Exception as e:
            raise TranscriptionError(f"Could not fetch or transcribe audio: {e!r}") from e
        if not text or not text.strip():
            raise TranscriptionError("Could not transcribe audio")
        return text

    async def deliver_reply(self, to: str, text: str, voice_preferred: bool) -> str:
        """
        Send ``text`` to ``to``, as a voice note when the user prefers voice.

        Voice is attempted only for replies shorter than
        ``voice_reply_max_chars`` and only when a TTS provider and an audio
        store are available. A failed synthesis, or a send that Twilio
        rejects, falls back to plain text.

        Sends are never abandoned on a timeout; the messenger bounds its own
        HTTP calls.

        Returns:
            One of "voice", "text", "failed", or "skipped" (no messenger)
        """
        if self.messenger is None:
            return DELIVERY_SKIPPED

        if voice_preferred and len(text) < self.voice_reply_max_chars and self._can_speak():
            media_url = await self._synthesize_reply(text)
            if media_url is not None:
                try:
                    await run_in_threadpool(self.messenger.send, to, "Voice response:", media_url)
                    return DELIVERED_VOICE
                except Exception as e:
                    logger.error("Error sending voice response, falling back to text: %r", e)

        try:
            await run_in_threadpool(self.messenger.send, to, text)
        except Exception as e:
            logger.error("Error sending response: %r", e)
            return DELIVERY_FAILED
        return DELIVERED_TEXT

    async def _synthesize_reply(self, text: str) -> Optional[str]:
        """Synthesize ``text`` and return its public URL, or None on failure."""
        try:
            audio = await asyncio.wait_for(self.tts_provider.synthesize(text), self.timeout)
            filename = self.audio_store.save(audio)
        except Exception as e:
            logger.error("Error synthesizing voice response: %r", e)
            return None
        return self.audio_store.public_url(filename)

    def _can_speak(self) -> bool:
        return self.tts_provider is not None and self.audio_store is not None
