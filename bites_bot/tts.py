# bites_bot/tts.py
"""
Text-to-Speech for voice replies.

Users who talk to the bot get spoken replies back. Synthesis is pluggable
(OpenAI or ElevenLabs, chosen with TTS_PROVIDER) and the resulting MP3 is
written to AUDIO_DIR, where the /audio static mount serves it so the
messaging platform can fetch it. Files are removed after
AUDIO_RETENTION_SECONDS.

Usage:
    from bites_bot.tts import AudioStore, get_tts_provider

    provider = get_tts_provider()
    audio = await provider.synthesize("Your order is confirmed!")
    filename = audio_store.save(audio)
    url = audio_store.public_url(filename)
"""

import asyncio
import logging
import os
import uuid
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional

from . import config

logger = logging.getLogger(__name__)


class SynthesisError(Exception):
    """Raised when a reply could not be turned into audio."""


class TTSProvider(str, Enum):
    """Supported TTS providers."""
    OPENAI = "openai"
    ELEVENLABS = "elevenlabs"


class BaseTTSProvider(ABC):
    """Abstract base class for TTS providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def synthesize(self, text: str, voice_id: Optional[str] = None) -> bytes:
        """
        Convert ``text`` to MP3 audio.

        Raises:
            SynthesisError: If the provider call fails
        """
        pass


class OpenAITTSProvider(BaseTTSProvider):
    """OpenAI Text-to-Speech provider."""

    VOICE_IDS = ("alloy", "nova", "shimmer", "onyx")

    def __init__(self, api_key: Optional[str] = None, model: str = "tts-1", default_voice: str = config.TTS_VOICE):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OpenAI API key not found. Set OPENAI_API_KEY environment variable.")

        self.model = model
        self.default_voice = default_voice

        from openai import AsyncOpenAI
        self.client = AsyncOpenAI(api_key=self.api_key)

    @property
    def name(self) -> str:
        return "OpenAI"

    async def synthesize(self, text: str, voice_id: Optional[str] = None) -> bytes:
        voice = voice_id or self.default_voice
        if voice not in self.VOICE_IDS:
            logger.warning("Invalid voice '%s', using 'nova'", voice)
            voice = "nova"

        # Slightly slower than default reads better over a phone speaker
        try:
            response = await self.client.audio.speech.create(
                model=self.model,
                voice=voice,
                input=text,
                speed=0.9,
                response_format="mp3",
            )
        except Exception as e:
            raise SynthesisError(f"OpenAI speech synthesis failed: {e}") from e

        audio_bytes = response.content
        logger.debug("Generated %d bytes of audio for %d chars", len(audio_bytes), len(text))
        return audio_bytes


class ElevenLabsTTSProvider(BaseTTSProvider):
    """ElevenLabs Text-to-Speech provider."""

    API_URL = "https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"
    # Rachel
    DEFAULT_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or os.getenv("ELEVENLABS_API_KEY")
        if not self.api_key:
            raise ValueError("ElevenLabs API key not found. Set ELEVENLABS_API_KEY environment variable.")

    @property
    def name(self) -> str:
        return "ElevenLabs"

    async def synthesize(self, text: str, voice_id: Optional[str] = None) -> bytes:
        import aiohttp

        url = self.API_URL.format(voice_id=voice_id or self.DEFAULT_VOICE_ID)
        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": self.api_key,
        }
        payload = {
            "text": text,
            "model_id": "eleven_monolingual_v1",
            "voice_settings": {"stability": 0.5, "similarity_boost": 0.5},
        }

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(url, json=payload, headers=headers) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise SynthesisError(f"ElevenLabs API error: {error_text}")
                    return await response.read()
        except aiohttp.ClientError as e:
            raise SynthesisError(f"ElevenLabs request failed: {e}") from e


_PROVIDERS = {
    TTSProvider.OPENAI: OpenAITTSProvider,
    TTSProvider.ELEVENLABS: ElevenLabsTTSProvider,
}

_provider_instance: Optional[BaseTTSProvider] = None


def get_tts_provider(provider_type: Optional[TTSProvider] = None, **kwargs) -> BaseTTSProvider:
    """
    Get the configured TTS provider (singleton).

    Args:
        provider_type: Which provider to use (defaults to TTS_PROVIDER, else OpenAI)
        **kwargs: Passed to the provider constructor
    """
    global _provider_instance

    if provider_type is None:
        try:
            provider_type = TTSProvider(config.TTS_PROVIDER)
        except ValueError:
            logger.warning("Unknown TTS provider '%s', defaulting to OpenAI", config.TTS_PROVIDER)
            provider_type = TTSProvider.OPENAI

    if _provider_instance is not None and _provider_instance.name.lower() == provider_type.value:
        return _provider_instance

    try:
        _provider_instance = _PROVIDERS[provider_type](**kwargs)
        logger.info("Initialized TTS provider: %s", _provider_instance.name)
    except Exception as e:
        logger.error("Failed to initialize TTS provider %s: %s", provider_type, e)
        raise

    return _provider_instance


# =============================================================================
# Audio Storage
# =============================================================================

class AudioStore:
    """
    Temporary home for synthesized replies.

    Files are named with a random UUID, served from ``/audio/<filename>``,
    and deleted ``retention_seconds`` after being saved.
    """

    def __init__(
        self,
        directory: Path = config.AUDIO_DIR,
        base_url: str = config.BASE_URL,
        retention_seconds: int = config.AUDIO_RETENTION_SECONDS,
    ):
        self.directory = Path(directory)
        self.base_url = base_url.rstrip("/")
        self.retention_seconds = retention_seconds
        self.directory.mkdir(parents=True, exist_ok=True)

    def save(self, audio: bytes, extension: str = ".mp3") -> str:
        filename = f"voice_response_{uuid.uuid4().hex}{extension}"
        (self.directory / filename).write_bytes(audio)
        self._schedule_cleanup(filename)
        return filename

    def public_url(self, filename: str) -> str:
        return f"{self.base_url}/audio/{filename}"

    def delete(self, filename: str) -> None:
        try:
            (self.directory / filename).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Error deleting voice file %s: %s", filename, e)

    def _schedule_cleanup(self, filename: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (sync caller); the file stays until cleared manually
            logger.debug("No running loop, not scheduling cleanup of %s", filename)
            return
        loop.call_later(self.retention_seconds, self.delete, filename)
