"""Request ID middleware for distributed tracing and log correlation."""
import time
import uuid
from collections.abc import Awaitable, Callable
from contextvars import ContextVar

import structlog
from fastapi import Request, Response
from opentelemetry.trace.status import Status, StatusCode
from starlette.middleware.base import BaseHTTPMiddleware

from codity.core.logging import get_logger
from codity.core.tracing import create_span, get_tracer

REQUEST_ID_HEADER = "X-Request-ID"
USER_ID_HEADER = "X-User-Id"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag every request with an ID and bind it into the logging context.

    The generated ID is returned as ``X-Request-ID``. When the caller sends
    ``X-User-Id``, it is bound to the structlog context as ``user_id`` so
    that repository and service logs for the request can be correlated with
    the acting user.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = str(uuid.uuid4())
        request_id_var.set(request_id)

        context: dict[str, str] = {"request_id": request_id}
        user_id = request.headers.get(USER_ID_HEADER)
        if user_id:
            context["user_id"] = user_id
        structlog.contextvars.bind_contextvars(**context)

        with create_span(
            tracer,
            f"{request.method} {request.url.path}",
            **{
                "http.method": request.method,
                "http.route": request.url.path,
                "request.id": request_id,
                "enduser.id": user_id,
            }
        ) as span:
            start_time = time.time()

            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=str(request.query_params) if request.query_params else None,
            )

            try:
                response = await call_next(request)
                response.headers[REQUEST_ID_HEADER] = request_id

                duration_ms = round((time.time() - start_time) * 1000, 2)

                span.set_attribute("http.status_code", response.status_code)
                span.set_attribute("request.duration_ms", duration_ms)
                if response.status_code >= 500:
                    span.set_status(Status(StatusCode.ERROR, f"HTTP {response.status_code}"))
                else:
                    span.set_status(Status(StatusCode.OK))

                logger.info(
                    "Request completed",
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                )

                return response

            except Exception as exc:
                duration_ms = round((time.time() - start_time) * 1000, 2)

                span.record_exception(exc)
                span.set_attribute("request.duration_ms", duration_ms)
                span.set_status(Status(StatusCode.ERROR, str(exc)))

                logger.error(
                    "Request failed",
                    error=str(exc),
                    error_type=type(exc).__name__,
                    duration_ms=duration_ms,
                    exc_info=True,
                )
                raise

            finally:
                structlog.contextvars.clear_contextvars()


def get_request_id() -> str:
    """Return the current request ID, or an empty string outside a request."""
    return request_id_var.get("")
