"""
Event consumption service.

This module owns the message subscription and runs the event loop that
multiplexes message arrival, context cancellation and termination signals.
Whichever trigger ends the loop, the subscription is cancelled and the
adapter is closed exactly once.
"""

import asyncio
from typing import Any, Dict, Optional

from loguru import logger

from ..domain.envelope import Envelope
from ..domain.state import ServiceState, TerminationCause
from ..exceptions import ServiceStateError
from ..interfaces.lifecycle import IHealthCheckable, IStartable, IStoppable
from ..interfaces.messaging import IMessagingAdapter, Subscription
from ..interfaces.telemetry import ITelemetryClient, Severity
from .classifier import MessageClassifier
from .shutdown import CloseOnce


class ConsumerService(IStartable, IStoppable, IHealthCheckable):
    """
    Consumes one message stream until a termination trigger fires.

    The service is bound to a single adapter for its whole life. ``start``
    runs as one task; ``stop`` may be called from any other task on the
    same event loop, before, during or after the loop's own teardown.
    """

    def __init__(self, adapter: IMessagingAdapter, telemetry: ITelemetryClient) -> None:
        self._adapter = adapter
        self._telemetry = telemetry
        self._classifier = MessageClassifier(telemetry)
        self._close_once = CloseOnce(adapter.close)

        self._state = ServiceState.CREATED
        self._subscription: Optional[Subscription] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._termination_cause: Optional[TerminationCause] = None
        self._last_signal: Optional[str] = None

        self._metrics = {
            'messages_received': 0,
            'messages_processed': 0,
            'messages_failed': 0,
        }

        self._telemetry.track_trace("Initializing consumer service", Severity.INFORMATION)

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def termination_cause(self) -> Optional[TerminationCause]:
        return self._termination_cause

    @property
    def metrics(self) -> Dict[str, int]:
        return dict(self._metrics)

    async def start(self, cancelled: asyncio.Event, signals: 'asyncio.Queue[Any]') -> None:
        """
        Subscribe and process messages until a termination trigger fires.

        Args:
            cancelled: Set by an ancestor to request shutdown
            signals: Termination signals, shared with the process entrypoint

        Raises:
            ServiceStateError: If the service was already started or stopped
            Exception: Whatever the adapter raised when subscribing. Nothing
                was acquired on this path, so the adapter is not closed.
        """
        if self._state is not ServiceState.CREATED:
            raise ServiceStateError(
                f"Cannot start service in state {self._state.name}")

        stop_event = asyncio.Event()
        self._stop_event = stop_event

        try:
            subscription = await self._adapter.subscribe()
        except Exception as e:
            self._telemetry.track_exception(
                "Failed to subscribe to events", e, Severity.CRITICAL)
            self._state = ServiceState.STOPPED
            raise

        self._subscription = subscription
        self._state = ServiceState.SUBSCRIBED
        self._telemetry.track_trace("Subscribed to events", Severity.INFORMATION)

        try:
            cause = await self._event_loop(subscription, cancelled, signals, stop_event)
        except asyncio.CancelledError:
            # The task itself was cancelled: same teardown as a cancelled context
            await self._terminate(subscription, TerminationCause.CONTEXT_CANCELLED)
            raise

        await self._terminate(subscription, cause)

    async def stop(self) -> None:
        """
        Stop the service.

        Ends the event loop if it is running and closes the adapter. Safe to
        call repeatedly and concurrently with the loop's own teardown; the
        adapter is closed at most once, and never if it was not opened.
        """
        self._telemetry.track_trace("Stopping service", Severity.INFORMATION)

        if self._stop_event is not None:
            self._stop_event.set()

        if self._subscription is None:
            if self._state is ServiceState.CREATED:
                self._state = ServiceState.STOPPED
            return

        await self._close_once.run()

    async def check_health(self) -> Dict[str, Any]:
        """Check consumer service health."""
        return {
            'healthy': self._state in (ServiceState.CREATED, ServiceState.SUBSCRIBED),
            'status': self._state.name.lower(),
            'details': {
                **self._metrics,
                'termination_cause': self._termination_cause.name if self._termination_cause else None,
                'last_signal': self._last_signal,
                'adapter_closed': self._close_once.done,
            }
        }

    async def _event_loop(self,
                          subscription: Subscription,
                          cancelled: asyncio.Event,
                          signals: 'asyncio.Queue[Any]',
                          stop_event: asyncio.Event) -> TerminationCause:
        """Handle one ready event per iteration until a termination trigger fires."""
        message_waiter = asyncio.ensure_future(subscription.messages.get())
        context_waiter = asyncio.ensure_future(cancelled.wait())
        stop_waiter = asyncio.ensure_future(stop_event.wait())
        signal_waiter = asyncio.ensure_future(signals.get())

        try:
            while True:
                done, _ = await asyncio.wait(
                    {message_waiter, context_waiter, stop_waiter, signal_waiter},
                    return_when=asyncio.FIRST_COMPLETED)

                # Messages already handed over are classified before any
                # termination trigger is honoured on the next iteration
                if message_waiter in done:
                    envelope = message_waiter.result()
                    message_waiter = asyncio.ensure_future(subscription.messages.get())
                    self._handle_envelope(envelope)
                    continue

                if signal_waiter in done:
                    sig = signal_waiter.result()
                    self._last_signal = str(getattr(sig, 'name', sig))
                    return TerminationCause.SIGNAL

                if context_waiter in done:
                    return TerminationCause.CONTEXT_CANCELLED

                return TerminationCause.STOP_REQUESTED

        finally:
            for waiter in (message_waiter, context_waiter, stop_waiter, signal_waiter):
                if not waiter.done():
                    waiter.cancel()
            # A cancelled getter leaves its item in the queue for the drain
            await asyncio.gather(
                message_waiter, context_waiter, stop_waiter, signal_waiter,
                return_exceptions=True)
            if (message_waiter.done() and not message_waiter.cancelled()
                    and message_waiter.exception() is None):
                self._handle_envelope(message_waiter.result())

    def _handle_envelope(self, envelope: Envelope) -> None:
        self._metrics['messages_received'] += 1
        if self._classifier.classify(envelope):
            self._metrics['messages_processed'] += 1
        else:
            self._metrics['messages_failed'] += 1

    def _drain(self, subscription: Subscription) -> int:
        """Classify envelopes that were queued before the trigger fired."""
        drained = 0
        while True:
            try:
                envelope = subscription.messages.get_nowait()
            except asyncio.QueueEmpty:
                return drained
            self._handle_envelope(envelope)
            drained += 1

    async def _terminate(self, subscription: Subscription, cause: TerminationCause) -> None:
        self._state = ServiceState.TERMINATING
        self._termination_cause = cause

        drained = self._drain(subscription)
        if drained:
            logger.debug(f"Classified {drained} queued envelope(s) before shutdown")

        try:
            subscription.cancel()
            await self._close_once.run()
            properties = {"Signal": self._last_signal} if self._last_signal else None
            self._telemetry.track_trace(
                cause.description, Severity.INFORMATION, properties=properties)
        finally:
            self._state = ServiceState.STOPPED
