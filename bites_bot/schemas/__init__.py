"""
Schemas Package
===============

Pydantic models used for API request validation and response serialization.

Schema Organization:
--------------------
- **chat.py**: JSON chat message request/response
- **orders.py**: Admin order listing

Naming Conventions:
-------------------
- *Out: Response models (e.g., OrderOut) - what API returns
- *Request: Request bodies (e.g., ChatMessageRequest)
- *Response: Composite response structures (e.g., OrderListResponse)
"""

from .chat import (
    CartLineOut,
    ChatMessageRequest,
    ChatMessageResponse,
)

from .orders import (
    OrderItemOut,
    OrderOut,
    OrderListResponse,
)

__all__ = [
    # Chat
    "CartLineOut",
    "ChatMessageRequest",
    "ChatMessageResponse",
    # Orders
    "OrderItemOut",
    "OrderOut",
    "OrderListResponse",
]
