"""
Menu Catalog
============

The restaurant menu is static data loaded once at startup. Items are grouped
into four categories and kept in declaration order, which matters: voice item
extraction scans the catalog front to back and takes the first hit.

Each item has a short id ("M1", "DR1") used by the text command
``add <id> <quantity>``. Spoken aliases ("coke", "pizza") help the voice
normalizer find items that customers rarely name in full.

Usage:
------
    from bites_bot.menu import build_default_catalog, MenuCategory

    catalog = build_default_catalog()
    item = catalog.find_by_id("m1")        # case-insensitive
    drinks = catalog.by_category(MenuCategory.DRINK)
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class MenuCategory(str, Enum):
    """Menu categories, in display order."""
    STARTER = "starter"
    MAIN = "main"
    DESSERT = "dessert"
    DRINK = "drink"

    @property
    def command(self) -> str:
        """Canonical command that lists this category."""
        return _CATEGORY_COMMANDS[self]

    @property
    def heading(self) -> str:
        """Heading used when rendering the category."""
        return _CATEGORY_HEADINGS[self]

    @classmethod
    def from_command(cls, command: str) -> Optional["MenuCategory"]:
        for category, keyword in _CATEGORY_COMMANDS.items():
            if keyword == command:
                return category
        return None


_CATEGORY_COMMANDS = {
    MenuCategory.STARTER: "starters",
    MenuCategory.MAIN: "mains",
    MenuCategory.DESSERT: "desserts",
    MenuCategory.DRINK: "drinks",
}

_CATEGORY_HEADINGS = {
    MenuCategory.STARTER: "Starters",
    MenuCategory.MAIN: "Main Courses",
    MenuCategory.DESSERT: "Desserts",
    MenuCategory.DRINK: "Drinks",
}


class MenuItem(BaseModel):
    """A purchasable menu item. Prices are exact decimals."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    price: Decimal = Field(ge=0)
    description: str = ""
    category: MenuCategory
    aliases: Tuple[str, ...] = ()

    @property
    def spoken_names(self) -> Tuple[str, ...]:
        """Lower-cased name followed by any aliases."""
        return (self.name.lower(),) + tuple(alias.lower() for alias in self.aliases)


class MenuCatalog:
    """Immutable, ordered collection of menu items."""

    def __init__(self, items: Iterable[MenuItem]):
        self._items: List[MenuItem] = []
        self._by_id: Dict[str, MenuItem] = {}
        for item in items:
            key = item.id.upper()
            if key in self._by_id:
                raise ValueError(f"Duplicate menu item id: {item.id}")
            self._by_id[key] = item
            self._items.append(item)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def all_items(self) -> List[MenuItem]:
        """All items, starters first, in declaration order."""
        return sorted(self._items, key=lambda item: _CATEGORY_ORDER[item.category])

    def by_category(self, category: MenuCategory) -> List[MenuItem]:
        return [item for item in self._items if item.category == category]

    def find_by_id(self, item_id: str) -> Optional[MenuItem]:
        """Look up an item by id, ignoring case."""
        if not item_id:
            return None
        return self._by_id.get(item_id.strip().upper())


_CATEGORY_ORDER = {category: index for index, category in enumerate(MenuCategory)}


# =============================================================================
# Default Menu
# =============================================================================

DEFAULT_MENU_ITEMS: List[MenuItem] = [
    MenuItem(id="S1", name="Spring Rolls", price=Decimal("8.99"), description="Crispy vegetable spring rolls (4 pcs)",
             category=MenuCategory.STARTER, aliases=("spring roll",)),
    MenuItem(id="S2", name="Chicken Wings", price=Decimal("12.99"), description="Spicy buffalo wings (8 pcs)",
             category=MenuCategory.STARTER, aliases=("wings",)),
    MenuItem(id="S3", name="Garlic Bread", price=Decimal("6.99"), description="Homemade garlic bread with herbs",
             category=MenuCategory.STARTER),
    MenuItem(id="M1", name="Margherita Pizza", price=Decimal("16.99"), description="Fresh tomato, mozzarella, basil",
             category=MenuCategory.MAIN, aliases=("pizza", "margherita")),
    MenuItem(id="M2", name="Chicken Burger", price=Decimal("14.99"), description="Grilled chicken with lettuce, tomato",
             category=MenuCategory.MAIN, aliases=("burger",)),
    MenuItem(id="M3", name="Pasta Carbonara", price=Decimal("18.99"), description="Creamy pasta with bacon and parmesan",
             category=MenuCategory.MAIN, aliases=("carbonara", "pasta")),
    MenuItem(id="M4", name="Fish & Chips", price=Decimal("19.99"), description="Beer battered cod with crispy fries",
             category=MenuCategory.MAIN, aliases=("fish and chips", "fish")),
    MenuItem(id="D1", name="Chocolate Cake", price=Decimal("7.99"), description="Rich chocolate cake with vanilla ice cream",
             category=MenuCategory.DESSERT, aliases=("cake",)),
    MenuItem(id="D2", name="Tiramisu", price=Decimal("8.99"), description="Classic Italian dessert",
             category=MenuCategory.DESSERT),
    MenuItem(id="DR1", name="Coca Cola", price=Decimal("3.99"), description="Classic soft drink",
             category=MenuCategory.DRINK, aliases=("coke",)),
    MenuItem(id="DR2", name="Fresh Orange Juice", price=Decimal("4.99"), description="Freshly squeezed orange juice",
             category=MenuCategory.DRINK, aliases=("orange juice", "juice")),
    MenuItem(id="DR3", name="Coffee", price=Decimal("3.49"), description="Freshly brewed coffee",
             category=MenuCategory.DRINK),
]


def build_default_catalog() -> MenuCatalog:
    return MenuCatalog(DEFAULT_MENU_ITEMS)
