import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_META = "HTTP_X_REQUEST_ID"
_MAX_REQUEST_ID_LENGTH = 128


def _incoming_request_id(request: HttpRequest) -> str:
    value = request.META.get(_REQUEST_ID_META, "").strip()
    if not value or len(value) > _MAX_REQUEST_ID_LENGTH:
        return str(uuid.uuid4())
    return value


class CorrelationIdMiddleware:
    """Tag every request with a correlation ID.

    The panel sends ``X-Request-ID`` when it has one; otherwise a UUID4 is
    generated. The ID is bound into structlog context vars, so order,
    catalog and workspace log lines of the request share it, and is echoed
    back on the response.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = _incoming_request_id(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid, method=request.method, path=request.path
        )

        started = time.monotonic()
        response = self.get_response(request)

        logger.info(
            "http.request",
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )

        response[REQUEST_ID_HEADER] = cid
        return response
