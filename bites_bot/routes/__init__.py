"""
Routes Package
==============

API route definitions, one APIRouter per module.

**Customer-Facing Routes:**
- webhook.py: Twilio WhatsApp webhook (text and voice notes)
- chat.py: JSON chat endpoint running the same pipeline without delivery

**Admin Routes:**
- admin_orders.py: Read-only order listing

Route Dependencies:
-------------------
Services are read from ``app.state`` through ``dependencies.get_processor``,
and rate limits are applied with ``limiter.limit()`` from middleware.py.

Error Handling:
---------------
- 400: Bad request (missing sender)
- 404: Not found (unknown order id)
- 422: Request validation failed
- 429: Too many requests (rate limited)
- 500: The webhook pipeline failed unexpectedly

Usage:
------
    from bites_bot.routes import webhook_router, chat_router, admin_orders_router

    app.include_router(webhook_router)
"""

from .webhook import webhook_router
from .chat import chat_router
from .admin_orders import admin_orders_router

__all__ = [
    "webhook_router",
    "chat_router",
    "admin_orders_router",
]
