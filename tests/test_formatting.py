"""
Tests for reply rendering.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from bites_bot import formatting
from bites_bot.menu import MenuCategory
from bites_bot.state import CartLine, Order, OrderLine

from conftest import FIXED_NOW, TEST_USER


def test_format_money():
    assert formatting.format_money(Decimal("84.95")) == "$84.95"
    assert formatting.format_money(Decimal("4")) == "$4.00"
    assert formatting.format_money(Decimal("0.125")) == "$0.13"


def test_format_clock_strips_leading_zero():
    assert formatting.format_clock(datetime(2024, 5, 1, 9, 5)) == "9:05 AM"
    assert formatting.format_clock(datetime(2024, 5, 1, 23, 45)) == "11:45 PM"


def test_format_menu_item(catalog):
    assert formatting.format_menu_item(catalog.find_by_id("S1")) == (
        "S1. Spring Rolls - $8.99\n   Crispy vegetable spring rolls (4 pcs)"
    )


def test_category_listing_has_hint(catalog):
    listing = formatting.format_category_listing(catalog, MenuCategory.DRINK)
    assert listing.startswith("*DRINKS*\n\n")
    assert "DR2. Fresh Orange Juice - $4.99" in listing
    assert listing.endswith('Example: "I want two cokes"')


def test_full_menu_lists_every_item_in_category_order(catalog):
    menu = formatting.format_full_menu(catalog)
    for item in catalog:
        assert f"{item.id}. {item.name}" in menu
    assert menu.index("*STARTERS*") < menu.index("*MAIN COURSES*") < menu.index("*DESSERTS*") < menu.index("*DRINKS*")


def test_empty_cart():
    assert formatting.format_cart([]) == formatting.EMPTY_CART_MESSAGE


def test_cart_lines_and_total():
    cart = [
        CartLine(item_id="M1", name="Margherita Pizza", price=Decimal("16.99"), quantity=5),
        CartLine(item_id="DR3", name="Coffee", price=Decimal("3.49"), quantity=1),
    ]
    text = formatting.format_cart(cart)
    assert text.startswith("*YOUR CART*")
    assert "Margherita Pizza x5 — $84.95" in text
    assert "Coffee x1 — $3.49" in text
    assert "*Total: $88.44*" in text
    assert 'Say "checkout" to place your order' in text


def _order(order_time=FIXED_NOW):
    return Order(
        order_id="ORD123456",
        user_id=TEST_USER,
        items=(OrderLine(item_id="M4", name="Fish & Chips", price=Decimal("19.99"), quantity=1),),
        total=Decimal("19.99"),
        order_time=order_time,
        estimated_delivery_time=order_time + timedelta(minutes=30),
    )


def test_order_confirmation():
    text = formatting.format_order_confirmation(_order(), "Delicious Bites")
    assert "*ORDER CONFIRMED!*" in text
    assert "Order ID: *ORD123456*" in text
    assert "Please have $19.99 ready" in text
    assert text.endswith("Thank you for choosing Delicious Bites!")


def test_tracking_in_progress():
    text = formatting.format_tracking(_order(), FIXED_NOW + timedelta(minutes=21))
    assert "Status: Out for delivery" in text
    assert "Order Time: 7:00 PM" in text
    assert text.endswith("Estimated delivery: 7:30 PM")


def test_tracking_delivered():
    text = formatting.format_tracking(_order(), FIXED_NOW + timedelta(hours=2))
    assert "Status: Delivered" in text
    assert text.endswith("Delivered! We hope you enjoyed your meal!")


def test_tracking_uses_order_timezone():
    eastern = timezone(timedelta(hours=-4))
    placed = datetime(2024, 5, 1, 12, 15, tzinfo=eastern)
    text = formatting.format_tracking(_order(placed), placed + timedelta(minutes=1))
    assert "Order Time: 12:15 PM" in text
    assert "Estimated delivery: 12:45 PM" in text


def test_static_texts_use_restaurant_name():
    assert "Welcome to Testaurant!" in formatting.welcome_text("Testaurant")
    assert "Thank you for visiting Testaurant!" in formatting.farewell_text("Testaurant")
