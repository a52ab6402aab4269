from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from uuid import uuid4

from products_api.core.logging import get_logger, request_id_var

logger = get_logger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid4())
        # request.state for handlers, the ContextVar for log records
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            logger.info(
                "request start %s %s",
                request.method,
                request.url.path,
                extra={"requestId": request_id},
            )

            response: Response = await call_next(request)
            response.headers["X-Request-Id"] = request_id

            logger.info(
                "request end %s %s -> %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={"requestId": request_id},
            )
        finally:
            request_id_var.reset(token)

        return response
