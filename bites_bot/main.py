"""
ASGI entry point.

    uvicorn bites_bot.main:app --port 3000
"""

from .app_factory import create_app
from .logging_config import setup_logging

# Configure logging at module load time
setup_logging()

app = create_app()
