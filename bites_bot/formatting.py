"""
Response Formatter.

Pure rendering functions that turn menu, cart, and order data into WhatsApp
text (``*bold*`` markup). Nothing here reads or writes state; everything a
function needs is passed in.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List

from .menu import MenuCatalog, MenuCategory, MenuItem
from .state import CartLine, Order, round_money


def format_money(amount: Decimal) -> str:
    return f"${round_money(Decimal(amount)):.2f}"


def format_clock(moment: datetime) -> str:
    """Render a time of day like "7:05 PM"."""
    return moment.strftime("%I:%M %p").lstrip("0")


# =============================================================================
# Menu
# =============================================================================

ADD_ITEM_HINTS = {
    MenuCategory.STARTER: 'Example: "Add two spring rolls"',
    MenuCategory.MAIN: 'Example: "I want one margherita pizza"',
    MenuCategory.DESSERT: 'Example: "Add chocolate cake"',
    MenuCategory.DRINK: 'Example: "I want two cokes"',
}


def format_menu_item(item: MenuItem) -> str:
    return f"{item.id}. {item.name} - {format_money(item.price)}\n   {item.description}"


def format_category(heading: str, items: Iterable[MenuItem]) -> str:
    message = f"*{heading.upper()}*\n\n"
    for item in items:
        message += format_menu_item(item) + "\n\n"
    return message


def format_category_listing(catalog: MenuCatalog, category: MenuCategory) -> str:
    """One category followed by a hint on how to add items from it."""
    message = format_category(category.heading, catalog.by_category(category))
    message += (
        '\nTo add an item, say: "Add [item name]" or "I want [quantity] [item name]"'
        f"\nOr type: add [item_id] [quantity]\n{ADD_ITEM_HINTS[category]}"
    )
    return message


def format_full_menu(catalog: MenuCatalog) -> str:
    message = "".join(
        format_category(category.heading, catalog.by_category(category))
        for category in MenuCategory
    )
    message += "\nTo add an item, say the item name with quantity or use: add [item_id] [quantity]"
    return message


# =============================================================================
# Cart
# =============================================================================

EMPTY_CART_MESSAGE = 'Your cart is empty.\n\nSay "menu" or type "menu" to browse our menu!'


def format_cart(cart: List[CartLine]) -> str:
    if not cart:
        return EMPTY_CART_MESSAGE

    lines = ["*YOUR CART*", ""]
    total = Decimal("0")
    for line in cart:
        total += line.subtotal
        lines.append(f"{line.name} x{line.quantity} — {format_money(line.subtotal)}")

    lines += [
        "",
        f"*Total: {format_money(total)}*",
        "",
        'Say "checkout" to place your order',
        'Say "clear cart" to empty cart',
        'Say "menu" to continue shopping',
    ]
    return "\n".join(lines)


def format_item_added(item: MenuItem, quantity: int) -> str:
    return (
        f"Added {quantity}x {item.name} to your cart!\n\n"
        'Say "cart" to view your order or "menu" to continue shopping.'
    )


# =============================================================================
# Orders
# =============================================================================

def format_order_confirmation(order: Order, restaurant_name: str) -> str:
    total = format_money(order.total)
    return (
        "*ORDER CONFIRMED!*\n\n"
        f"Order ID: *{order.order_id}*\n"
        f"Total: *{total}*\n\n"
        "Your meal will be prepared and delivered in approximately 25-30 minutes.\n\n"
        f"Please have {total} ready for cash payment upon delivery.\n\n"
        f'Track your order by saying: "track order {order.order_id}"\n\n'
        f"Thank you for choosing {restaurant_name}!"
    )


def format_tracking(order: Order, now: datetime) -> str:
    elapsed = order.minutes_elapsed(now)
    stage = order.stage_at(now)

    if elapsed < 30:
        footer = f"Estimated delivery: {format_clock(order.estimated_delivery_time)}"
    else:
        footer = "Delivered! We hope you enjoyed your meal!"

    return (
        "*ORDER TRACKING*\n\n"
        f"Order ID: {order.order_id}\n"
        f"Status: {stage.label}\n"
        f"Total: {format_money(order.total)}\n"
        f"Order Time: {format_clock(order.order_time)}\n\n"
        f"{footer}"
    )


# =============================================================================
# Static Texts
# =============================================================================

def welcome_text(restaurant_name: str) -> str:
    return (
        f"*Welcome to {restaurant_name}!*\n\n"
        "I can understand both text and voice messages!\n\n"
        "*Available Commands:*\n"
        '- Say "menu" or "show menu" - Browse our full menu\n'
        '- Say "cart" or "my cart" - View your current order\n'
        '- Say "help" - Get assistance\n'
        '- Say "track order [ID]" - Track your order\n\n'
        "To order, you can say things like:\n"
        '- "I want two pizzas"\n'
        '- "Add a chicken burger"\n'
        '- "Show starters"\n\n'
        'Ready to order? Say "menu" to get started!'
    )


MENU_PROMPT = (
    "*OUR MENU*\n\n"
    "Which category would you like to explore?\n\n"
    'Say "starters" for appetizers\n'
    'Say "mains" for main courses\n'
    'Say "desserts" for sweet treats\n'
    'Say "drinks" for beverages\n\n'
    'Or say "full" to see everything'
)

HELP_TEXT = (
    "*HELP & VOICE COMMANDS*\n\n"
    "*Voice Orders:*\n"
    "Just speak naturally! Say things like:\n"
    '- "I want two pizzas"\n'
    '- "Add a chicken burger"\n'
    '- "Show desserts"\n'
    '- "Show my cart"\n\n'
    "*Text Commands:*\n"
    '- "menu" - Browse our menu\n'
    '- "add [item_id] [quantity]" - Add an item, e.g. "add M1 2"\n'
    '- "cart" - View your current order\n'
    '- "checkout" - Place your order\n'
    '- "clear" - Empty your cart\n\n'
    "*Order Tracking:*\n"
    'Say "track order [ID]" to check status\n\n'
    "*Restaurant Hours:*\n"
    "Monday - Sunday: 11:00 AM - 11:00 PM\n\n"
    "*Contact:*\n"
    "For urgent queries, call: (555) 123-4567\n\n"
    "I understand both voice and text!"
)


def farewell_text(restaurant_name: str) -> str:
    return (
        f"Thank you for visiting {restaurant_name}!\n\n"
        "We hope to serve you again soon. Have a wonderful day!\n\n"
        "Send a message or voice note anytime to start a new order!"
    )


UNRECOGNIZED_TEXT = (
    "I didn't quite understand that.\n\n"
    "*Try saying:*\n"
    '- "Show me the menu"\n'
    '- "I want a pizza"\n'
    '- "Show my cart"\n'
    '- "Help"\n\n'
    "*Or type:*\n"
    '- "menu" - Browse our menu\n'
    '- "cart" - View your order\n'
    '- "help" - Get assistance\n\n'
    "I can understand both voice and text!"
)

CART_CLEARED_TEXT = 'Your cart has been cleared.\n\nSay "menu" to start shopping again!'

ADD_USAGE_ERROR = (
    'Please specify both the item and quantity. For example, type "add M1 2", '
    'or say "Add two pizzas" or "I want one burger".'
)

ADD_INVALID_ERROR = (
    "Sorry, I couldn't find that item or the quantity is invalid. "
    'Please try again or say "menu" to browse our options.'
)

CHECKOUT_EMPTY_ERROR = 'Your cart is empty! Say "menu" to browse our delicious options.'

ORDER_NOT_FOUND_ERROR = "Order not found. Please check your order ID and try again."

EMPTY_MESSAGE_PROMPT = "Please send a message or voice note to place your order!"

VOICE_APOLOGY = (
    "Sorry, I couldn't understand your voice message. Please try again or send a text message.\n\n"
    "You can also type your order using commands like:\n"
    '- "menu" - to see our menu\n'
    '- "add M1 2" - to add items\n'
    '- "cart" - to view your order'
)
