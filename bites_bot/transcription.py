# bites_bot/transcription.py
"""
Speech-to-Text provider abstraction layer.

Voice notes arrive as a media URL on the inbound webhook. This module fetches
the audio and turns it into text. Providers are pluggable the same way TTS
providers are (see tts.py).

Usage:
    from bites_bot.transcription import download_media, get_transcriber

    audio = await download_media(media_url)
    text = await get_transcriber().transcribe(audio, "audio/ogg")

Any failure is raised as ``TranscriptionError`` so the message pipeline can
answer with an apology instead of crashing.
"""

import logging
import mimetypes
import os
from abc import ABC, abstractmethod
from typing import Optional

import aiohttp

from . import config

logger = logging.getLogger(__name__)


class TranscriptionError(Exception):
    """Raised when audio could not be fetched or transcribed."""


# =============================================================================
# Media Download
# =============================================================================

async def download_media(url: str, timeout: Optional[float] = None) -> bytes:
    """
    Download an inbound media file.

    Twilio media URLs require HTTP Basic auth with the account SID and auth
    token when the account enforces authenticated media access.

    Raises:
        TranscriptionError: On any network error or non-200 response
    """
    auth = None
    if config.TWILIO_ACCOUNT_SID and config.TWILIO_AUTH_TOKEN:
        auth = aiohttp.BasicAuth(config.TWILIO_ACCOUNT_SID, config.TWILIO_AUTH_TOKEN)

    client_timeout = aiohttp.ClientTimeout(total=timeout or config.EXTERNAL_CALL_TIMEOUT_SECONDS)
    try:
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.get(url, auth=auth) as response:
                if response.status != 200:
                    raise TranscriptionError(f"Media download failed with status {response.status}")
                data = await response.read()
    except aiohttp.ClientError as e:
        raise TranscriptionError(f"Media download failed: {e}") from e

    logger.debug("Downloaded %d bytes of media", len(data))
    return data


# =============================================================================
# Providers
# =============================================================================

class BaseTranscriber(ABC):
    """Abstract base class for speech-to-text providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for display."""
        pass

    @abstractmethod
    async def transcribe(self, audio: bytes, mime_type: str = "audio/ogg") -> str:
        """
        Transcribe audio to text.

        Args:
            audio: Raw audio bytes (WhatsApp voice notes are OGG/Opus)
            mime_type: Content type reported by the messaging platform

        Returns:
            The transcript, possibly empty if nothing was recognized

        Raises:
            TranscriptionError: If the provider call fails
        """
        pass


class OpenAITranscriber(BaseTranscriber):
    """OpenAI speech-to-text (Whisper) provider."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = config.TRANSCRIPTION_MODEL,
        language: str = config.TRANSCRIPTION_LANGUAGE,
    ):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OpenAI API key not found. Set OPENAI_API_KEY environment variable.")

        self.model = model
        self.language = language

        from openai import AsyncOpenAI
        self.client = AsyncOpenAI(api_key=self.api_key)

        logger.debug("OpenAI transcriber initialized with model: %s", model)

    @property
    def name(self) -> str:
        return "OpenAI"

    async def transcribe(self, audio: bytes, mime_type: str = "audio/ogg") -> str:
        base_type = mime_type.split(";")[0].strip()
        extension = mimetypes.guess_extension(base_type) or ".ogg"
        # The API infers the format from the file name
        filename = f"voice{'.ogg' if extension in ('.oga', '.opus') else extension}"

        try:
            response = await self.client.audio.transcriptions.create(
                model=self.model,
                file=(filename, audio, base_type),
                language=self.language,
            )
        except Exception as e:
            raise TranscriptionError(f"Transcription failed: {e}") from e

        text = getattr(response, "text", "") or ""
        logger.debug("Transcribed %d bytes into %d chars", len(audio), len(text))
        return text


# Cached provider instance
_transcriber_instance: Optional[BaseTranscriber] = None


def get_transcriber(**kwargs) -> BaseTranscriber:
    """
    Get the speech-to-text provider.

    Uses a singleton pattern - the same instance is returned for
    subsequent calls.
    """
    global _transcriber_instance

    if _transcriber_instance is not None:
        return _transcriber_instance

    try:
        _transcriber_instance = OpenAITranscriber(**kwargs)
        logger.info("Initialized transcriber: %s", _transcriber_instance.name)
    except Exception as e:
        logger.error("Failed to initialize transcriber: %s", e)
        raise

    return _transcriber_instance
