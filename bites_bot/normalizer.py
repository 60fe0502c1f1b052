"""
Command Normalizer.

Maps free-form utterances to the short canonical commands the interpreter
understands ("menu", "cart", "add M1 2", ...). Only voice transcripts are
normalized; typed text is already expected to be a command and passes
through as-is.

Voice normalization runs three steps and stops at the first that applies:

1. **Phrase table**: the first phrase (in declaration order) contained in the
   transcript wins, e.g. "can you show menu please" -> "menu".
2. **Item extraction**: when the transcript contains an ordering cue ("add",
   "order", "want"), find a quantity and a single menu item and synthesize
   ``add <ITEM_ID> <quantity>``. Only one item is ever extracted;
   "two pizzas and one coke" yields the pizza with quantity 1.
3. **Pass-through**: the cleaned transcript is returned unchanged and the
   interpreter will treat it as unrecognized.

Normalization never raises.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from .menu import MenuCatalog, MenuItem


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Ordered: first contained phrase wins
VOICE_PHRASES: List[Tuple[str, str]] = [
    ("show menu", "menu"),
    ("view menu", "menu"),
    ("see menu", "menu"),
    ("menu please", "menu"),
    ("show cart", "cart"),
    ("view cart", "cart"),
    ("my cart", "cart"),
    ("check cart", "cart"),
    ("clear cart", "clear"),
    ("empty cart", "clear"),
    ("remove all", "clear"),
    ("check out", "checkout"),
    ("place order", "checkout"),
    ("complete order", "checkout"),
    ("finish order", "checkout"),
    ("show starters", "starters"),
    ("show appetizers", "starters"),
    ("show mains", "mains"),
    ("show main courses", "mains"),
    ("show desserts", "desserts"),
    ("show drinks", "drinks"),
    ("show beverages", "drinks"),
    ("help me", "help"),
    ("what can i do", "help"),
    ("how does this work", "help"),
]

ORDER_CUES = ("add", "order", "want")

WORD_TO_NUM: Dict[str, int] = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}

_QUANTITY_PATTERN = re.compile(r"\b(\d+|" + "|".join(WORD_TO_NUM) + r")\b")

# Words dropped before checking whether what is left names part of an item
_FILLER_PATTERN = re.compile(r"\b(?:add|order|want|i|to|the|a|an)\b")


# =============================================================================
# Extraction Helpers
# =============================================================================

def extract_quantity(text: str) -> int:
    """Return the last number mentioned in ``text`` (digits or one..ten), default 1."""
    matches = _QUANTITY_PATTERN.findall(text)
    if not matches:
        return 1
    last = matches[-1]
    if last in WORD_TO_NUM:
        return WORD_TO_NUM[last]
    return int(last) or 1


def _strip_filler(text: str) -> str:
    return " ".join(_FILLER_PATTERN.sub(" ", text).split())


def find_spoken_item(text: str, catalog: MenuCatalog) -> Optional[MenuItem]:
    """
    Find the first menu item mentioned in ``text``.

    An item matches when its name or one of its aliases appears in the text,
    or when the text left after removing filler words is part of the item
    name ("chicken" -> Chicken Wings). Items are scanned in menu order.
    """
    remainder = _strip_filler(text)
    for item in catalog.all_items():
        if any(name in text for name in item.spoken_names):
            return item
        if remainder and remainder in item.name.lower():
            return item
    return None


def match_voice_phrase(text: str) -> Optional[str]:
    for phrase, command in VOICE_PHRASES:
        if phrase in text:
            return command
    return None


# =============================================================================
# Public API
# =============================================================================

def normalize_command(text: str, was_voice: bool, catalog: MenuCatalog) -> str:
    """
    Turn an inbound message into a canonical command string.

    Args:
        text: Message text, already transcribed if it was audio
        was_voice: True if the text came from a voice note
        catalog: Menu used for item extraction

    Returns:
        A canonical command, or the cleaned input if nothing applied
    """
    if not was_voice:
        return text

    cleaned = (text or "").strip().lower()
    if not cleaned:
        return cleaned

    command = match_voice_phrase(cleaned)
    if command:
        logger.debug("Voice phrase matched: %r -> %r", cleaned, command)
        return command

    if any(cue in cleaned for cue in ORDER_CUES):
        item = find_spoken_item(cleaned, catalog)
        if item is not None:
            quantity = extract_quantity(cleaned)
            command = f"add {item.id} {quantity}"
            logger.debug("Voice order extracted: %r -> %r", cleaned, command)
            return command

    return cleaned
