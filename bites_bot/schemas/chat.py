"""
Chat Schemas
============

Pydantic models for the JSON chat endpoint. It runs the same pipeline as the
WhatsApp webhook but returns the reply in the response instead of sending it,
which makes it suitable for a web widget or manual testing.

Endpoint Coverage:
------------------
- POST /chat/message: Send a command, receive the reply and the cart

Validation:
-----------
- message cannot exceed MAX_MESSAGE_LENGTH. An empty message is allowed and
  answered with a prompt, the same way the webhook treats an empty body.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..config import MAX_MESSAGE_LENGTH
from ..state import CartLine, round_money


class ChatMessageRequest(BaseModel):
    """
    Request body for sending a chat message.

    Attributes:
        user_id: Stable identifier of the user (phone number, browser id, ...)
        message: Message text, or a voice transcript when ``voice`` is true
        voice: Treat ``message`` as a voice transcript (enables normalization)
    """
    user_id: str = Field(..., min_length=1)
    message: str = Field("", max_length=MAX_MESSAGE_LENGTH)
    voice: bool = False


class CartLineOut(BaseModel):
    item_id: str
    name: str
    price: float
    quantity: int
    line_total: float

    @classmethod
    def from_line(cls, line: CartLine) -> "CartLineOut":
        return cls(
            item_id=line.item_id,
            name=line.name,
            price=float(line.price),
            quantity=line.quantity,
            line_total=float(round_money(line.subtotal)),
        )


class ChatMessageResponse(BaseModel):
    """
    Response from sending a chat message.

    Attributes:
        reply: Bot's response text
        intent: Which command handled the message (e.g. "add_item", "checkout")
        command: Canonical command the message was normalized to
        cart: Cart contents after the command
        cart_total: Sum of line totals
        order_id: Set when the message placed or tracked an order
    """
    reply: str
    intent: str
    command: Optional[str] = None
    cart: List[CartLineOut] = Field(default_factory=list)
    cart_total: float = 0.0
    order_id: Optional[str] = None
