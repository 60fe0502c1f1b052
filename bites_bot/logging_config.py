"""
Logging for the ordering bot.

Call ``setup_logging()`` once at startup (``bites_bot.main`` does). It installs
a single stdout handler on the root logger; calling it again replaces that
handler instead of stacking a second one.

Customer data policy:
    Message text and phone numbers are only ever logged at DEBUG. As a
    backstop, the handler masks anything that looks like a phone number in
    INFO-and-above records, keeping the last four digits:

        "whatsapp:+15551230001" -> "whatsapp:+*******0001"

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, or CRITICAL (default: INFO)
"""
import logging
import os
import re
import sys
from typing import Optional

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP clients used by the speech providers and Twilio; chatty at INFO
THIRD_PARTY_LOGGERS = ("httpx", "httpcore", "openai", "twilio", "aiohttp")

PHONE_PATTERN = re.compile(r"(?<![\w+])(whatsapp:)?\+(\d{7,15})\b")


def mask_phone_numbers(text: str) -> str:
    def _mask(match: "re.Match") -> str:
        prefix, digits = match.group(1) or "", match.group(2)
        return f"{prefix}+{'*' * (len(digits) - 4)}{digits[-4:]}"

    return PHONE_PATTERN.sub(_mask, text)


class RedactPhoneNumbers(logging.Filter):
    """Mask phone numbers in records at INFO and above. DEBUG records pass untouched."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.INFO:
            message = record.getMessage()
            masked = mask_phone_numbers(message)
            if masked != message:
                record.msg = masked
                record.args = None
        return True


class _BotHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def resolve_level(level: Optional[str] = None) -> str:
    """Level name from ``level`` or LOG_LEVEL, falling back to INFO."""
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.strip().upper()
    return level if level in VALID_LEVELS else "INFO"


def setup_logging(level: Optional[str] = None) -> str:
    """
    Configure logging for the bot.

    Args:
        level: Level name. Reads LOG_LEVEL when not provided.

    Returns:
        The level name actually applied
    """
    level = resolve_level(level)
    numeric_level = getattr(logging, level)

    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, _BotHandler)]:
        root.removeHandler(handler)

    handler = _BotHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(RedactPhoneNumbers())
    root.addHandler(handler)
    root.setLevel(numeric_level)

    logging.getLogger("bites_bot").setLevel(numeric_level)

    # At DEBUG the HTTP clients inherit the root level again
    third_party_level = logging.NOTSET if level == "DEBUG" else logging.WARNING
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    logging.getLogger(__name__).debug("Logging configured at %s level", level)
    return level
