"""
Custom middleware for the application
"""
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
import logging
import time
import uuid

logger = logging.getLogger(__name__)


class RequestTrackingMiddleware(BaseHTTPMiddleware):
    """Assigns a request id, logs each request and flags slow ledger queries"""

    def __init__(self, app, slow_request_threshold: float = 2.0, sensitive_params: set = None):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold
        self.sensitive_params = sensitive_params or {
            'password', 'token', 'secret', 'key', 'authorization'
        }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        safe_params = {
            k: v for k, v in request.query_params.items()
            if k.lower() not in self.sensitive_params
        }
        logger.info(f"🔄 {request.method} {request.url.path} - Query: {safe_params}", extra={
            "request_id": request_id,
        })

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        status_icon = "✅" if response.status_code < 400 else "❌"
        logger.info(
            f"{status_icon} {request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s",
            extra={"request_id": request_id}
        )

        if process_time > self.slow_request_threshold:
            logger.warning("Slow request detected", extra={
                "path": request.url.path,
                "method": request.method,
                "process_time": process_time,
                "request_id": request_id
            })

        return response
