# middleware/request_id.py
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from schoolhub.core.logging import access_logger

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id (reusing the client's one when sent) and logs its duration."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ):
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        started = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - started

        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        access_logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "request_id": request.state.request_id,
                "duration": round(duration * 1000, 2),
                "user_id": getattr(request.state, "user_id", None),
                "ip": request.client.host if request.client else None,
            }
        )
        return response
