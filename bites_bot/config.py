"""
Configuration Module for the Delicious Bites Ordering Bot
=========================================================

This module centralizes all configuration settings, environment variables, and
constants used throughout the bot. Values are parsed once at import time, after
``python-dotenv`` has loaded any ``.env`` file found at the project root.

Configuration Categories:
-------------------------
- **Restaurant**: Display name used in greetings and confirmations.

- **Server**: Port and public base URL. The base URL is needed so Twilio can
  fetch synthesized voice replies served from /audio.

- **Twilio**: WhatsApp messaging credentials. When any of them is missing the
  messenger runs in mock mode and only logs outbound messages.

- **Voice**: Speech-to-text and text-to-speech settings, the maximum reply
  length that is still synthesized, and how long audio files are kept.

- **Orders**: Fixed delivery estimate applied at checkout.

- **Rate Limiting / CORS / Input Validation**: HTTP surface protection.

Environment Variables:
----------------------
- RESTAURANT_NAME: Restaurant display name (default: "Delicious Bites")
- BASE_URL: Public URL of this server (default: "http://localhost:3000")
- PORT: HTTP port (default: 3000)
- TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN / TWILIO_WHATSAPP_NUMBER
- VOICE_REPLY_MAX_CHARS: Replies at or above this length go out as text (default: 500)
- EXTERNAL_CALL_TIMEOUT_SECONDS: Timeout for download/STT/TTS/send (default: 15)
- AUDIO_DIR: Where synthesized audio is written (default: ./temp)
- AUDIO_RETENTION_SECONDS: Lifetime of a synthesized file (default: 60)
- TRANSCRIPTION_MODEL / TRANSCRIPTION_LANGUAGE
- TTS_PROVIDER / TTS_VOICE
- ESTIMATED_DELIVERY_MINUTES: Delivery estimate (default: 30)
- RATE_LIMIT_WEBHOOK / RATE_LIMIT_ENABLED
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")
- MAX_MESSAGE_LENGTH: Max chat message length (default: 2000)

Usage:
------
    from bites_bot.config import (
        RESTAURANT_NAME,
        VOICE_REPLY_MAX_CHARS,
        EXTERNAL_CALL_TIMEOUT_SECONDS,
    )
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


# =============================================================================
# Restaurant Configuration
# =============================================================================

RESTAURANT_NAME: str = os.getenv("RESTAURANT_NAME", "Delicious Bites")


# =============================================================================
# Server Configuration
# =============================================================================

PORT: int = int(os.getenv("PORT", "3000"))

# Twilio downloads media from this URL, so it must be publicly reachable
BASE_URL: str = os.getenv("BASE_URL", f"http://localhost:{PORT}").rstrip("/")


# =============================================================================
# Twilio Configuration
# =============================================================================

TWILIO_ACCOUNT_SID: str = os.getenv("TWILIO_ACCOUNT_SID", "")
TWILIO_AUTH_TOKEN: str = os.getenv("TWILIO_AUTH_TOKEN", "")

# Sender address, e.g. "whatsapp:+14155238886"
TWILIO_WHATSAPP_NUMBER: str = os.getenv("TWILIO_WHATSAPP_NUMBER", "")


# =============================================================================
# Voice Configuration
# =============================================================================

# Only shorter replies are synthesized; long menus read badly as audio
VOICE_REPLY_MAX_CHARS: int = int(os.getenv("VOICE_REPLY_MAX_CHARS", "500"))

# Applies to each external call: media download, transcription, synthesis, send
EXTERNAL_CALL_TIMEOUT_SECONDS: float = float(os.getenv("EXTERNAL_CALL_TIMEOUT_SECONDS", "15"))

AUDIO_DIR: Path = Path(os.getenv("AUDIO_DIR", str(BASE_DIR / "temp")))
AUDIO_RETENTION_SECONDS: int = int(os.getenv("AUDIO_RETENTION_SECONDS", "60"))

TRANSCRIPTION_MODEL: str = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")
TRANSCRIPTION_LANGUAGE: str = os.getenv("TRANSCRIPTION_LANGUAGE", "en")

TTS_PROVIDER: str = os.getenv("TTS_PROVIDER", "openai").lower()
TTS_VOICE: str = os.getenv("TTS_VOICE", "nova")


# =============================================================================
# Order Configuration
# =============================================================================

ESTIMATED_DELIVERY_MINUTES: int = int(os.getenv("ESTIMATED_DELIVERY_MINUTES", "30"))

# Prefix of generated order ids, e.g. "ORD482913"
ORDER_ID_PREFIX: str = "ORD"


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Uses slowapi with in-memory storage (use Redis for multi-worker prod).

RATE_LIMIT_WEBHOOK: str = os.getenv("RATE_LIMIT_WEBHOOK", "30 per minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_rate_limit_webhook() -> str:
    """
    Return the current inbound message rate limit.

    This function allows dynamic override in tests without modifying
    the module-level constant.
    """
    return RATE_LIMIT_WEBHOOK


# =============================================================================
# Input Validation Configuration
# =============================================================================

MAX_MESSAGE_LENGTH: int = int(os.getenv("MAX_MESSAGE_LENGTH", "2000"))


# =============================================================================
# CORS Configuration
# =============================================================================

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]
