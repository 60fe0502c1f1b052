"""
Application factory for the ordering bot.

``create_app`` wires the menu, the in-memory stores, the messenger, and the
optional speech providers into a MessageProcessor and mounts the routes.
Speech providers that are not configured (no API key) are left out: voice
notes are then answered with an apology and replies always go out as text.

Tests pass their own MessageProcessor built from fakes.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import config
from .commands import CommandInterpreter
from .menu import build_default_catalog
from .message_processor import MessageProcessor
from .messaging import TwilioMessenger
from .middleware import RequestIDMiddleware, limiter
from .routes import admin_orders_router, chat_router, webhook_router
from .stores import InMemoryOrderStore, InMemorySessionStore
from .transcription import get_transcriber
from .tts import AudioStore, get_tts_provider

logger = logging.getLogger(__name__)


def build_processor() -> MessageProcessor:
    """Build a MessageProcessor from the environment configuration."""
    catalog = build_default_catalog()
    orders = InMemoryOrderStore()

    try:
        transcriber = get_transcriber()
    except ValueError as e:
        logger.warning("Voice input disabled: %s", e)
        transcriber = None

    try:
        tts_provider = get_tts_provider()
    except ValueError as e:
        logger.warning("Voice replies disabled: %s", e)
        tts_provider = None

    return MessageProcessor(
        catalog=catalog,
        sessions=InMemorySessionStore(),
        orders=orders,
        interpreter=CommandInterpreter(catalog, orders),
        messenger=TwilioMessenger(),
        transcriber=transcriber,
        tts_provider=tts_provider,
        audio_store=AudioStore(),
    )


def create_app(processor: Optional[MessageProcessor] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        processor: Message pipeline to serve. Built from the environment
                   configuration when not provided.

    Returns:
        Configured FastAPI application
    """
    if processor is None:
        processor = build_processor()

    app = FastAPI(
        title="Restaurant Order Bot API",
        description="WhatsApp ordering bot with voice support",
        version="1.0.0",
    )
    app.state.processor = processor

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Configure rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Synthesized voice replies, fetched by Twilio
    if processor.audio_store is not None:
        app.mount("/audio", StaticFiles(directory=str(processor.audio_store.directory)), name="audio")

    app.include_router(webhook_router)
    app.include_router(chat_router)
    app.include_router(admin_orders_router)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return f"{config.RESTAURANT_NAME} ordering bot is running!"

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    logger.info(
        "Application created (twilio=%s, voice_in=%s, voice_out=%s)",
        "mock" if getattr(processor.messenger, "mock", True) else "live",
        processor.transcriber is not None,
        processor.tts_provider is not None,
    )
    return app


def run_server(host: str = "0.0.0.0", port: Optional[int] = None, reload: bool = False) -> None:
    """
    Run the bot with uvicorn.

    Args:
        host: Host to bind to
        port: Port to run on (defaults to PORT)
        reload: Enable auto-reload for development
    """
    import uvicorn

    port = port or config.PORT
    logger.info("Starting server on %s:%d", host, port)
    logger.info("Webhook URL: %s/webhook", config.BASE_URL)

    if reload:
        uvicorn.run("bites_bot.main:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(create_app(), host=host, port=port)
