"""Event dispatcher for infrastructure event system.

In-process handler registry with synchronous and background dispatch.
Handlers are isolated: one failing handler is logged and the rest still run.
The bus never retries.
"""

import atexit
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from infrastructure.events.models import Event
from infrastructure.logging import (
    bind_request_context,
    clear_request_context,
    get_module_logger,
)

logger = get_module_logger()

# Event handler registry: event_type -> list of handlers
EVENT_HANDLERS: Dict[str, List[Callable[[Event], Any]]] = {}

# Managed executor for background dispatches
_EXECUTOR: Optional[ThreadPoolExecutor] = None
_executor_lock = Lock()
_executor_shutdown = False


def register_event_handler(event_type: str):
    """Decorator to register an event handler for a specific event type.

    Registering the same function twice for one event type is a no-op.

    Args:
        event_type: The type of event to handle (e.g., 'notification.requested').
    """

    def decorator(handler_func: Callable[[Event], Any]) -> Callable[[Event], Any]:
        handlers = EVENT_HANDLERS.setdefault(event_type, [])
        if handler_func not in handlers:
            handlers.append(handler_func)
        logger.debug(
            "registered_event_handler",
            handler=getattr(handler_func, "__name__", "unknown"),
            event_type=event_type,
            total_handlers=len(handlers),
        )
        return handler_func

    return decorator


def dispatch_event(event: Event) -> List[Any]:
    """Dispatch event synchronously to all registered handlers.

    Args:
        event: The event to dispatch.

    Returns:
        Return values of the handlers that completed.
    """
    results = []
    handlers = EVENT_HANDLERS.get(event.event_type, [])

    logger.info(
        "dispatching_event",
        event_type=event.event_type,
        handler_count=len(handlers),
        correlation_id=str(event.correlation_id),
    )

    for handler in handlers:
        try:
            results.append(handler(event))
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "event_handler_failed",
                handler=getattr(handler, "__name__", "unknown"),
                event_type=event.event_type,
                error=str(e),
                error_type=type(e).__name__,
                correlation_id=str(event.correlation_id),
            )

    return results


def _background_worker(data: Dict[str, Any]) -> None:
    evt = Event.from_dict(data)
    clear_request_context()
    with bind_request_context(correlation_id=str(evt.correlation_id)):
        try:
            dispatch_event(evt)
        except Exception as e:  # pylint: disable=broad-except
            logger.exception(
                "background_event_dispatch_failed",
                event_type=evt.event_type,
                error=str(e),
            )


def _get_or_create_executor(max_workers: int = 4) -> Optional[ThreadPoolExecutor]:
    """Lazily create the module-scoped executor.

    Returns None when the executor has been explicitly shut down.
    """
    global _EXECUTOR
    with _executor_lock:
        if _executor_shutdown:
            return None
        if _EXECUTOR is None:
            _EXECUTOR = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="event-worker"
            )
            logger.debug("created_background_event_executor", max_workers=max_workers)
        return _EXECUTOR


def start_event_executor(max_workers: int = 4) -> None:
    """Explicitly start the background executor (optional)."""
    global _executor_shutdown
    with _executor_lock:
        _executor_shutdown = False
    _get_or_create_executor(max_workers=max_workers)


def shutdown_event_executor(wait: bool = True) -> None:
    """Shut down the background executor and refuse further submissions.

    Idempotent.

    Args:
        wait: If True, wait for pending tasks to complete.
    """
    global _EXECUTOR, _executor_shutdown
    with _executor_lock:
        if _EXECUTOR is None:
            _executor_shutdown = True
            return
        try:
            _EXECUTOR.shutdown(wait=wait)
            logger.debug("background_event_executor_shut_down", wait=wait)
        finally:
            _EXECUTOR = None
            _executor_shutdown = True


@atexit.register
def _atexit_shutdown():
    shutdown_event_executor(wait=False)


def dispatch_background(event: Event) -> Future:
    """Submit the event to the background executor.

    The event crosses the thread boundary as its ``to_dict`` form and is
    rebuilt with ``Event.from_dict`` in the worker, so handlers never share
    mutable state with the publisher. Handler exceptions are caught and
    logged inside the worker.

    Args:
        event: The event to dispatch in background.

    Returns:
        Future of the background dispatch.

    Raises:
        RuntimeError: If the executor has been shut down.
    """
    executor = _get_or_create_executor()
    if executor is None:
        logger.error(
            "event_executor_unavailable",
            event_type=event.event_type,
            correlation_id=str(event.correlation_id),
        )
        raise RuntimeError("Event executor has been shut down")
    return executor.submit(_background_worker, event.to_dict())


def get_registered_events() -> List[str]:
    """Get list of all registered event types."""
    return list(EVENT_HANDLERS.keys())


def get_handlers_for_event(event_type: str) -> List[Callable[[Event], Any]]:
    """Get all handlers registered for a specific event type."""
    return EVENT_HANDLERS.get(event_type, [])


def clear_handlers() -> None:
    """Clear all registered handlers.

    WARNING: This is intended for testing only.
    """
    EVENT_HANDLERS.clear()
    logger.debug("cleared_all_event_handlers")
