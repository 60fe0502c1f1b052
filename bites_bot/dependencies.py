"""
FastAPI dependencies.

Long-lived services are created once by ``create_app`` and kept on
``app.state``; routes reach them through these functions so tests can build
an app with fakes and nothing else changes.

    @router.get("/orders")
    def list_orders(processor: MessageProcessor = Depends(get_processor)):
        ...
"""

from fastapi import Request

from .message_processor import MessageProcessor


def get_processor(request: Request) -> MessageProcessor:
    return request.app.state.processor
