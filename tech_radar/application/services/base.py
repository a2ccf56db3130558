"""Base classes shared by the application services.

LoggingMixin gives every service a structlog logger bound with the
service name and the correlation id of the current request.
StoreCallMixin runs store calls under the caller's timeout and turns
collaborator failures into domain errors.

Usage:
    class MyService(StoreCallMixin):
        def __init__(self, store: SomeStore) -> None:
            self._store = store
            self._init_logger()
            self._init_store_calls(default_timeout=10.0)

        async def do_something(self, item_id: str) -> None:
            log = self._log_operation("do_something", item_id=item_id)
            item = await self._call_store("get", self._store.get(item_id))
            log.info("something_done")
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from tech_radar.application.ports.voting_event_store import VotingEventStoreProtocol
from tech_radar.application.services.request_timeout import current_timeout
from tech_radar.domain.errors.concurrent_modification import (
    ConcurrentModificationError,
)
from tech_radar.domain.errors.store import (
    OperationTimeoutError,
    StoreUnavailableError,
)
from tech_radar.domain.errors.voting_event import EventNotFoundError
from tech_radar.domain.exceptions import RadarError
from tech_radar.domain.models.voting_event import VotingEvent
from tech_radar.infrastructure.observability.correlation import get_correlation_id

T = TypeVar("T")

DEFAULT_STORE_TIMEOUT_SECONDS = 10.0
REAPPLY_ATTEMPTS = 3


class LoggingMixin:
    """Mixin providing structured logging for services.

    The logger is bound with:
    - service: The class name of the service
    - component: The component type (default: "radar")

    Each operation gets:
    - operation: The name of the operation being performed
    - correlation_id: From context for request tracing
    - Any additional context passed to _log_operation()

    Attributes:
        _log: The structlog BoundLogger for this service instance.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "radar") -> None:
        """Initialize the logger with service name binding.

        Args:
            component: The component type for log categorization.
        """
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Create operation-scoped logger with correlation ID.

        Args:
            operation: Name of the operation being performed.
            **context: Additional context to bind to the logger.

        Returns:
            BoundLogger with operation and correlation context.
        """
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )


class StoreCallMixin(LoggingMixin):
    """Mixin running store calls under a timeout.

    Domain errors raised by a store (duplicate keys, lost compare-and-set)
    pass through unchanged. Anything else is a collaborator failure: a
    timeout becomes OperationTimeoutError, every other exception becomes
    StoreUnavailableError with the original chained as ``__cause__``.
    Nothing is retried.
    """

    _default_timeout: float

    def _init_store_calls(
        self, default_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS
    ) -> None:
        self._default_timeout = default_timeout

    async def _call_store(self, operation: str, call: Awaitable[T]) -> T:
        """Await a store call.

        Args:
            operation: Store operation name, used in errors and logs.
            call: The awaitable returned by the store method.

        Returns:
            The store's result.

        Raises:
            RadarError: Domain errors raised by the store, unchanged.
            OperationTimeoutError: If the call exceeds the timeout.
            StoreUnavailableError: If the store failed otherwise.
        """
        timeout = current_timeout(self._default_timeout)
        try:
            return await asyncio.wait_for(call, timeout=timeout)
        except RadarError:
            raise
        except asyncio.TimeoutError as exc:
            self._log.warning(
                "store_call_timed_out",
                store_operation=operation,
                timeout_seconds=timeout,
                correlation_id=get_correlation_id(),
            )
            raise OperationTimeoutError(operation, timeout) from exc
        except Exception as exc:
            self._log.error(
                "store_call_failed",
                store_operation=operation,
                error_type=type(exc).__name__,
                error=str(exc),
                correlation_id=get_correlation_id(),
            )
            reason = str(exc) or type(exc).__name__
            raise StoreUnavailableError(operation, reason) from exc


class EventStoreMixin(StoreCallMixin):
    """Shared reads and compare-and-set writes on voting events.

    ``_commit_event`` reports a lost compare-and-set. ``_reapply_event`` is
    for changes that can be decided again on whatever copy is current.

    Subclasses set ``_event_store`` before use.
    """

    _event_store: VotingEventStoreProtocol

    async def _get_event(
        self,
        event_id: str,
        include_cancelled: bool = False,
    ) -> VotingEvent:
        """Fetch an event.

        Raises:
            EventNotFoundError: If the id does not resolve, or the event is
                soft-cancelled and ``include_cancelled`` is False.
        """
        event = await self._call_store("get_event", self._event_store.get(event_id))
        if event is None or (event.cancelled and not include_cancelled):
            raise EventNotFoundError(event_id)
        return event

    async def _commit_event(
        self, read: VotingEvent, updated: VotingEvent
    ) -> VotingEvent:
        """Write ``updated`` if the event still has the version of ``read``.

        Raises:
            ConcurrentModificationError: If the event changed in between.
        """
        return await self._call_store(
            "update_event",
            self._event_store.update_cas(updated, expected_version=read.version),
        )

    async def _reapply_event(
        self,
        read: VotingEvent,
        change: Callable[[VotingEvent], VotingEvent],
    ) -> VotingEvent:
        """Commit ``change(read)``, reapplying it to a fresh copy on conflict.

        After a lost compare-and-set the event is read again and ``change``
        applied to the new copy.

        ``change`` is decided again on every copy, so it may raise a domain
        error against state another writer just stored. Returning the copy
        it was given means there is nothing to write. At most
        REAPPLY_ATTEMPTS writes are tried.

        Raises:
            EventNotFoundError: If the event disappeared or was cancelled.
            ConcurrentModificationError: If every attempt lost.
        """
        event = read
        attempt = 1
        while True:
            updated = change(event)
            if updated is event:
                return event
            try:
                return await self._commit_event(event, updated)
            except ConcurrentModificationError:
                if attempt >= REAPPLY_ATTEMPTS:
                    raise
            self._log.info(
                "event_changed_reapplying",
                event_id=read.id,
                attempt=attempt,
                correlation_id=get_correlation_id(),
            )
            attempt += 1
            event = await self._get_event(read.id)
