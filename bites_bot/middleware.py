"""
HTTP middleware and rate limiting shared by all routes.
"""

import logging
import uuid
from typing import Callable

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .config import RATE_LIMIT_ENABLED

logger = logging.getLogger(__name__)


# Uses in-memory storage by default
# For production with multiple workers, use Redis: Limiter(key_func=..., storage_uri="redis://...")
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each request.
    The ID is available in request.state.request_id and returned in X-Request-ID header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        return response
