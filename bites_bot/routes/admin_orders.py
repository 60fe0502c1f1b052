"""
Admin Orders Routes
===================

Read-only view of the orders placed since the server started. Orders live in
the in-memory OrderStore and are lost on restart.

Endpoints:
----------
- GET /orders: List all orders with a count
- GET /orders/{order_id}: One order (404 if unknown)

Order Status:
-------------
Orders are stored once at checkout and never updated. The status returned
here is derived from the time elapsed since the order was placed:
- preparing: less than 5 minutes
- cooking: 5 to 20 minutes
- out for delivery: 20 to 30 minutes
- delivered: 30 minutes or more

Authentication:
---------------
None. Put these endpoints behind a proxy or firewall in production.

Usage:
------
    GET /orders
    GET /orders/ORD482913
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_processor
from ..message_processor import MessageProcessor
from ..schemas.orders import OrderListResponse, OrderOut


logger = logging.getLogger(__name__)

# Router definition
admin_orders_router = APIRouter(prefix="/orders", tags=["Admin - Orders"])


@admin_orders_router.get("", response_model=OrderListResponse)
def list_orders(processor: MessageProcessor = Depends(get_processor)) -> OrderListResponse:
    """List every order, oldest first."""
    now = processor.interpreter.clock()
    orders = processor.orders.all_orders()
    return OrderListResponse(
        total_orders=len(orders),
        orders=[OrderOut.from_order(order, now) for order in orders],
    )


@admin_orders_router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: str, processor: MessageProcessor = Depends(get_processor)) -> OrderOut:
    """Get one order by id (case-insensitive)."""
    order = processor.orders.get(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderOut.from_order(order, processor.interpreter.clock())
