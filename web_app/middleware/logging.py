"""Logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable, Optional


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status, error kind and duration.

    The error kind is set on ``request.state`` by the service error handler;
    failed requests are logged at WARNING (4xx) or ERROR (5xx).
    """
    
    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortlink.web")
    
    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        
        response = await call_next(request)
        
        duration_ms = (time.perf_counter() - start_time) * 1000
        error_kind = getattr(request.state, "error_kind", None)
        
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        
        message = f"{request.method} {request.url.path} from {client_ip} - Status: {response.status_code}"
        if error_kind:
            message += f" [{error_kind}]"
        self.logger.log(level, f"{message} - Duration: {duration_ms:.2f}ms")
        
        return response
