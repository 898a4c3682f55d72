"""FastAPI middleware for request tracing and locale negotiation."""

import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from usuarios_api.errors import handle_exception
from usuarios_api.i18n import request_locale

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind per-request context before any handler runs.

    - Reads X-Request-ID from request headers, or generates a UUID if missing
    - Negotiates the locale from Accept-Language and stores it on request.state
    - Binds request_id and locale to structlog context
    - Echoes X-Request-ID and Content-Language on the response, including the
      500s produced by the catch-all handler
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        locale = request_locale(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, locale=locale)

        try:
            response = await call_next(request)
        except Exception as exc:
            # Unmatched exceptions skip ExceptionMiddleware and would otherwise
            # be answered by ServerErrorMiddleware, outside this middleware.
            response = await handle_exception(request, exc)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers.setdefault("Content-Language", locale.replace("_", "-"))

        return response
