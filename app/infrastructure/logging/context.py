"""Request context binding for structured logging.

Binds a correlation id (and any request metadata) to structlog's context
vars so every entry logged while handling a request, including the
dispatcher's audit and error entries, carries it.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(correlation_id="req-123", user_id="user-1"):
        logger.info("processing_request")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind request-scoped context for the duration of the block.

    Args:
        correlation_id: Request identifier. Generated if not provided.
        user_id: Id of the user the request is about.
        request_path: HTTP request path (e.g., "/api/v1/notifications/send").
        request_method: HTTP method (e.g., "GET").
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation id in use.

    Example:
        @app.middleware("http")
        async def logging_middleware(request: Request, call_next):
            with bind_request_context(
                correlation_id=request.headers.get("X-Correlation-ID"),
                request_path=request.url.path,
                request_method=request.method,
            ) as correlation_id:
                response = await call_next(request)
                response.headers["X-Correlation-ID"] = correlation_id
                return response
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}
    optional = {
        "user_id": user_id,
        "request_path": request_path,
        "request_method": request_method,
    }
    context.update({k: v for k, v in optional.items() if v is not None})
    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    return structlog.contextvars.get_contextvars().get("correlation_id")


def clear_request_context() -> None:
    """Clear all request-scoped context.

    Background workers call this before handling an event so context from a
    previous task on the same thread does not leak into its entries.
    """
    structlog.contextvars.clear_contextvars()
