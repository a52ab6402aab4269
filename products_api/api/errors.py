from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from products_api.core.logging import get_logger
from products_api.schemas import ResponseBody

logger = get_logger(__name__)

MSG_INVALID_PATH_PARAM = "invalid path param"
MSG_PARAM_MUST_BE_INT = "parameter must be int"
MSG_INVALID_JSON = "invalid json"
MSG_NOT_FOUND = "product not found"
MSG_NOT_UNIQUE = "product not unique"
MSG_INTERNAL = "internal error"


class APIError(Exception):
    """An error that is rendered as an error envelope with the given status code."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def envelope(status_code: int, message: str, data: Optional[Any] = None, error: bool = True) -> JSONResponse:
    body = ResponseBody[Any](message=message, data=data, error=error)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return envelope(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Everything validated by FastAPI here is the request body.
        logger.info(
            "rejected request body on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            extra={"requestId": _request_id(request)},
        )
        return envelope(status.HTTP_400_BAD_REQUEST, MSG_INVALID_JSON)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        response = envelope(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        # No internal details in the response.
        logger.exception("Unhandled exception", extra={"requestId": _request_id(request)})
        return envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, MSG_INTERNAL)
