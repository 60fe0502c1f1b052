"""
Conversation and order state.

A ``ChatSession`` is the per-user conversation state: the cart and whether the
user prefers voice replies. An ``Order`` is the immutable snapshot taken at
checkout. Orders only ever store the "confirmed" status; the delivery stage a
customer sees is derived from how long ago the order was placed.

Models are pydantic so quantity and price constraints are checked on
construction and, for cart lines, on assignment.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, validate_call

from .menu import MenuItem

CENT = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round to 2 decimal places for currency."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class CartLine(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    item_id: str
    name: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class ChatSession(BaseModel):
    """Mutable conversation state for one user.

    Invariant: at most one cart line per item id, every quantity >= 1.
    """
    user_id: str
    cart: List[CartLine] = Field(default_factory=list)
    voice_preferred: bool = False

    def find_line(self, item_id: str) -> Optional[CartLine]:
        for line in self.cart:
            if line.item_id == item_id:
                return line
        return None

    @validate_call
    def add_item(self, item: MenuItem, quantity: PositiveInt) -> CartLine:
        """Add ``quantity`` of ``item``, merging into an existing line."""
        line = self.find_line(item.id)
        if line is None:
            line = CartLine(item_id=item.id, name=item.name, price=item.price, quantity=quantity)
            self.cart.append(line)
        else:
            line.quantity += quantity
        return line

    def clear_cart(self) -> None:
        self.cart = []

    @property
    def cart_total(self) -> Decimal:
        return sum((line.subtotal for line in self.cart), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.cart)


class DeliveryStage(str, Enum):
    PREPARING = "preparing"
    COOKING = "cooking"
    OUT_FOR_DELIVERY = "out for delivery"
    DELIVERED = "delivered"

    @property
    def label(self) -> str:
        return _STAGE_LABELS[self]


_STAGE_LABELS = {
    DeliveryStage.PREPARING: "Being prepared in kitchen",
    DeliveryStage.COOKING: "Cooking in progress",
    DeliveryStage.OUT_FOR_DELIVERY: "Out for delivery",
    DeliveryStage.DELIVERED: "Delivered",
}


def stage_for_elapsed(minutes: int) -> DeliveryStage:
    """Delivery stage after ``minutes`` whole minutes since the order was placed."""
    if minutes < 5:
        return DeliveryStage.PREPARING
    if minutes < 20:
        return DeliveryStage.COOKING
    if minutes < 30:
        return DeliveryStage.OUT_FOR_DELIVERY
    return DeliveryStage.DELIVERED


class OrderLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: str
    name: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "OrderLine":
        return cls(item_id=line.item_id, name=line.name, price=line.price, quantity=line.quantity)


class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: str
    user_id: str
    items: Tuple[OrderLine, ...] = Field(min_length=1)
    total: Decimal = Field(ge=0)
    order_time: datetime
    estimated_delivery_time: datetime
    status: Literal["confirmed"] = "confirmed"

    def minutes_elapsed(self, now: datetime) -> int:
        """Whole minutes since the order was placed, never negative."""
        seconds = (now - self.order_time).total_seconds()
        return max(0, int(seconds // 60))

    def stage_at(self, now: datetime) -> DeliveryStage:
        return stage_for_elapsed(self.minutes_elapsed(now))
