"""
Order Schemas
=============

Pydantic models for the read-only admin order endpoints.

Endpoint Coverage:
------------------
- GET /orders: List every order placed since the server started
- GET /orders/{order_id}: One order

Status:
-------
Orders are stored as "confirmed". The ``status`` returned here is the delivery
stage derived at query time (preparing, cooking, out for delivery, delivered),
so the same order reads differently as time passes.

Money is returned as floats rounded to 2 decimal places.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel

from ..state import Order, OrderLine, round_money


class OrderItemOut(BaseModel):
    """
    One line of an order snapshot.

    Attributes:
        item_id: Menu item id (e.g. "M1")
        name: Item name at checkout time
        price: Unit price at checkout time
        quantity: Number ordered
        line_total: price * quantity
    """
    item_id: str
    name: str
    price: float
    quantity: int
    line_total: float

    @classmethod
    def from_line(cls, line: OrderLine) -> "OrderItemOut":
        return cls(
            item_id=line.item_id,
            name=line.name,
            price=float(line.price),
            quantity=line.quantity,
            line_total=float(round_money(line.subtotal)),
        )


class OrderOut(BaseModel):
    """
    Response model for an order.

    Attributes:
        id: Order id (e.g. "ORD482913")
        user_id: Sender address of the customer
        items: Snapshot of the cart at checkout
        total: Order total
        status: Delivery stage at query time
        order_time: When the order was placed
        estimated_delivery: Delivery estimate
    """
    id: str
    user_id: str
    items: List[OrderItemOut]
    total: float
    status: str
    order_time: datetime
    estimated_delivery: datetime

    @classmethod
    def from_order(cls, order: Order, now: datetime) -> "OrderOut":
        return cls(
            id=order.order_id,
            user_id=order.user_id,
            items=[OrderItemOut.from_line(line) for line in order.items],
            total=float(round_money(order.total)),
            status=order.stage_at(now).value,
            order_time=order.order_time,
            estimated_delivery=order.estimated_delivery_time,
        )


class OrderListResponse(BaseModel):
    """
    All orders with a count.

    Example:
        {
            "total_orders": 2,
            "orders": [...]
        }
    """
    total_orders: int
    orders: List[OrderOut]
