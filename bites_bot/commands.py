"""
Command Interpreter
===================

Turns a canonical command into a reply, updating the user's session and the
order store along the way.

Dispatch:
---------
Commands are matched against an ordered rule table; the first rule whose
predicate accepts the command handles it. Order matters: "hi" is checked
before everything else, and the unrecognized fallback comes last.

    #   intent          matches
    1   greeting        contains "hello"/"hi", or equals "start"
    2   menu            "menu"
    3   category        "starters" | "mains" | "desserts" | "drinks"
    4   full_menu       "full"
    5   add_item        starts with "add "
    6   view_cart       "cart"
    7   clear_cart      "clear"
    8   checkout        "checkout"
    9   track_order     starts with "track "
    10  help            "help"
    11  farewell        contains "bye"
    12  unrecognized    anything else

State Changes:
--------------
Only add_item, clear_cart, and checkout touch the session, and only checkout
creates an order. Malformed commands (unknown item, bad quantity, missing
tokens) produce a corrective reply and change nothing; no exception leaves
``handle()``.

Order IDs:
----------
"ORD" followed by six digits taken from the current time in milliseconds.
Two checkouts in the same millisecond window would collide, so the generator
bumps the suffix until the id is free in the order store.

Usage:
------
    interpreter = CommandInterpreter(catalog, order_store)
    result = interpreter.handle(session, "add m1 2")
    result.reply   # "Added 2x Margherita Pizza to your cart! ..."
    result.intent  # "add_item"
"""

import logging
import re
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from . import formatting
from .config import ESTIMATED_DELIVERY_MINUTES, ORDER_ID_PREFIX, RESTAURANT_NAME
from .menu import MenuCatalog, MenuCategory
from .state import ChatSession, Order, OrderLine
from .stores import OrderStore


logger = logging.getLogger(__name__)

# Plain ASCII digits only; int() would also take "+3", "1_000" and full-width digits
QUANTITY_PATTERN = re.compile(r"[0-9]+")


def local_now() -> datetime:
    return datetime.now().astimezone()


def generate_order_id(orders: OrderStore, now: datetime) -> str:
    """Time-derived order id that is not yet used in ``orders``."""
    suffix = int(now.timestamp() * 1000) % 1_000_000
    order_id = f"{ORDER_ID_PREFIX}{suffix:06d}"
    while order_id in orders:
        suffix = (suffix + 1) % 1_000_000
        order_id = f"{ORDER_ID_PREFIX}{suffix:06d}"
    return order_id


# -----------------------------------------------------------------------------
# Data Classes
# -----------------------------------------------------------------------------

@dataclass
class CommandResult:
    """Outcome of one command."""
    reply: str
    intent: str
    order: Optional[Order] = None


@dataclass(frozen=True)
class CommandRule:
    intent: str
    matches: Callable[[str], bool]
    handler: Callable[[ChatSession, str], CommandResult]


# -----------------------------------------------------------------------------
# Predicates
# -----------------------------------------------------------------------------

def _is_greeting(text: str) -> bool:
    return "hello" in text or "hi" in text or text == "start"


def _is_category(text: str) -> bool:
    return MenuCategory.from_command(text) is not None


def _is_farewell(text: str) -> bool:
    return "bye" in text or "goodbye" in text


def _equals(keyword: str) -> Callable[[str], bool]:
    return lambda text: text == keyword


def _starts_with(prefix: str) -> Callable[[str], bool]:
    return lambda text: text.startswith(prefix)


# -----------------------------------------------------------------------------
# Interpreter
# -----------------------------------------------------------------------------

class CommandInterpreter:
    """
    Ordered (predicate, handler) dispatcher over canonical commands.

    The interpreter holds no per-user state of its own. Callers must serialize
    calls for the same session (see ``SessionStore.lock``).
    """

    def __init__(
        self,
        catalog: MenuCatalog,
        orders: OrderStore,
        restaurant_name: str = RESTAURANT_NAME,
        clock: Callable[[], datetime] = local_now,
        delivery_minutes: int = ESTIMATED_DELIVERY_MINUTES,
    ):
        self.catalog = catalog
        self.orders = orders
        self.restaurant_name = restaurant_name
        self.clock = clock
        self.delivery_minutes = delivery_minutes
        # Serializes id generation + insert across users
        self._checkout_lock = threading.Lock()

        self.rules: List[CommandRule] = [
            CommandRule("greeting", _is_greeting, self._greet),
            CommandRule("menu", _equals("menu"), self._menu),
            CommandRule("category", _is_category, self._category),
            CommandRule("full_menu", _equals("full"), self._full_menu),
            CommandRule("add_item", _starts_with("add "), self._add_item),
            CommandRule("view_cart", _equals("cart"), self._view_cart),
            CommandRule("clear_cart", _equals("clear"), self._clear_cart),
            CommandRule("checkout", _equals("checkout"), self._checkout),
            CommandRule("track_order", _starts_with("track "), self._track_order),
            CommandRule("help", _equals("help"), self._help),
            CommandRule("farewell", _is_farewell, self._farewell),
        ]

    def handle(self, session: ChatSession, command: str) -> CommandResult:
        text = (command or "").strip().lower()
        for rule in self.rules:
            if rule.matches(text):
                result = rule.handler(session, text)
                break
        else:
            result = CommandResult(formatting.UNRECOGNIZED_TEXT, "unrecognized")

        logger.debug("Handled %s command for %s", result.intent, session.user_id)
        return result

    # -------------------------------------------------------------------------
    # Read-only handlers
    # -------------------------------------------------------------------------

    def _greet(self, session: ChatSession, text: str) -> CommandResult:
        return CommandResult(formatting.welcome_text(self.restaurant_name), "greeting")

    def _menu(self, session: ChatSession, text: str) -> CommandResult:
        return CommandResult(formatting.MENU_PROMPT, "menu")

    def _category(self, session: ChatSession, text: str) -> CommandResult:
        category = MenuCategory.from_command(text)
        return CommandResult(formatting.format_category_listing(self.catalog, category), "category")

    def _full_menu(self, session: ChatSession, text: str) -> CommandResult:
        return CommandResult(formatting.format_full_menu(self.catalog), "full_menu")

    def _view_cart(self, session: ChatSession, text: str) -> CommandResult:
        return CommandResult(formatting.format_cart(session.cart), "view_cart")

    def _help(self, session: ChatSession, text: str) -> CommandResult:
        return CommandResult(formatting.HELP_TEXT, "help")

    def _farewell(self, session: ChatSession, text: str) -> CommandResult:
        return CommandResult(formatting.farewell_text(self.restaurant_name), "farewell")

    def _track_order(self, session: ChatSession, text: str) -> CommandResult:
        tokens = text.split()[1:]
        # "track order ORD123" and "track ORD123" are both accepted
        if len(tokens) > 1 and tokens[0] == "order":
            tokens = tokens[1:]
        order = self.orders.get(tokens[0].upper()) if tokens else None
        if order is None:
            return CommandResult(formatting.ORDER_NOT_FOUND_ERROR, "track_order")
        return CommandResult(formatting.format_tracking(order, self.clock()), "track_order", order)

    # -------------------------------------------------------------------------
    # Mutating handlers
    # -------------------------------------------------------------------------

    def _add_item(self, session: ChatSession, text: str) -> CommandResult:
        tokens = text.split()
        if len(tokens) < 3:
            return CommandResult(formatting.ADD_USAGE_ERROR, "add_item")

        item = self.catalog.find_by_id(tokens[1])
        quantity = int(tokens[2]) if QUANTITY_PATTERN.fullmatch(tokens[2]) else 0

        if item is None or quantity <= 0:
            logger.debug("Rejected add command %r", text)
            return CommandResult(formatting.ADD_INVALID_ERROR, "add_item")

        session.add_item(item, quantity)
        return CommandResult(formatting.format_item_added(item, quantity), "add_item")

    def _clear_cart(self, session: ChatSession, text: str) -> CommandResult:
        session.clear_cart()
        return CommandResult(formatting.CART_CLEARED_TEXT, "clear_cart")

    def _checkout(self, session: ChatSession, text: str) -> CommandResult:
        if not session.cart:
            return CommandResult(formatting.CHECKOUT_EMPTY_ERROR, "checkout")

        now = self.clock()
        with self._checkout_lock:
            order = Order(
                order_id=generate_order_id(self.orders, now),
                user_id=session.user_id,
                items=tuple(OrderLine.from_cart_line(line) for line in session.cart),
                total=session.cart_total,
                order_time=now,
                estimated_delivery_time=now + timedelta(minutes=self.delivery_minutes),
            )
            self.orders.add(order)

        session.clear_cart()
        logger.info("Order %s confirmed (%d lines, total %s)", order.order_id, len(order.items), order.total)
        return CommandResult(
            formatting.format_order_confirmation(order, self.restaurant_name),
            "checkout",
            order,
        )
