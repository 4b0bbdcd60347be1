"""
Application startup and process supervision.

This module wires the telemetry client, the message stream adapter and the
consumer service together, forwards OS termination signals into the
service, and turns the outcome into a process exit code.
"""

import asyncio
import signal
from typing import Any, Dict, Optional

from loguru import logger

from ..core.interfaces.messaging import IMessagingAdapter
from ..core.interfaces.telemetry import ITelemetryClient, Severity
from ..core.services.consumer import ConsumerService
from ..infrastructure.config.models import ApplicationConfig
from ..infrastructure.messaging import create_messaging_adapter
from ..infrastructure.telemetry.client import create_telemetry_client

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM)
LOOP_HANDLER = object()

EXIT_OK = 0
EXIT_FAILURE = 1


class ApplicationStartup:
    """
    Builds the consumer service and supervises it until it terminates.

    The supervisor and the service both listen on the same termination
    signal queue. Whichever of them receives a signal, the service tears
    down exactly once and ``run`` returns after the service task finishes.
    """

    def __init__(self,
                 config: ApplicationConfig,
                 adapter: Optional[IMessagingAdapter] = None,
                 telemetry: Optional[ITelemetryClient] = None) -> None:
        self._config = config
        self._telemetry = telemetry or create_telemetry_client(config.telemetry)
        self._adapter = adapter or create_messaging_adapter(config.messaging)
        self._service = ConsumerService(self._adapter, self._telemetry)
        self._cancelled: Optional[asyncio.Event] = None
        self._signals: Optional['asyncio.Queue[Any]'] = None

        self._telemetry.track_trace("All adapters initialized successfully", Severity.INFORMATION)

    @property
    def service(self) -> ConsumerService:
        return self._service

    @property
    def signals(self) -> Optional['asyncio.Queue[Any]']:
        """Termination signal queue, available while ``run`` is active."""
        return self._signals

    def cancel(self) -> None:
        """Cancel the service's context, as an ancestor shutdown would."""
        if self._cancelled is not None:
            self._cancelled.set()

    async def run(self, install_signal_handlers: bool = True) -> int:
        """
        Run the consumer until it terminates.

        Args:
            install_signal_handlers: Register SIGINT/SIGTERM on the running loop

        Returns:
            Process exit code: 0 after a clean shutdown, 1 if the service failed
        """
        loop = asyncio.get_running_loop()
        self._cancelled = asyncio.Event()
        self._signals = asyncio.Queue()

        registered: Dict[signal.Signals, Any] = {}
        if install_signal_handlers:
            registered = self._install_signal_handlers(loop, self._signals)

        service_task = asyncio.ensure_future(
            self._service.start(self._cancelled, self._signals))
        self._telemetry.track_trace("Service layer initialized successfully", Severity.INFORMATION)

        try:
            return await self._supervise(service_task, self._signals)
        finally:
            self._remove_signal_handlers(loop, registered)

    async def _supervise(self, service_task: 'asyncio.Future[None]',
                         signals: 'asyncio.Queue[Any]') -> int:
        interval = self._config.service.keepalive_interval

        while True:
            signal_waiter = asyncio.ensure_future(signals.get())
            done, _ = await asyncio.wait(
                {service_task, signal_waiter},
                timeout=interval,
                return_when=asyncio.FIRST_COMPLETED)

            if signal_waiter in done:
                sig = signal_waiter.result()
                self._telemetry.track_trace(
                    "Received termination signal", Severity.INFORMATION,
                    properties={"Signal": str(getattr(sig, 'name', sig))})
                await self._service.stop()
                await asyncio.wait({service_task})
                return self._exit_code(service_task)

            signal_waiter.cancel()
            await asyncio.gather(signal_waiter, return_exceptions=True)

            if service_task in done:
                return self._exit_code(service_task)

            logger.info("Waiting for termination signal")

    def _exit_code(self, service_task: 'asyncio.Future[None]') -> int:
        if service_task.cancelled():
            return EXIT_FAILURE

        error = service_task.exception()
        if error is not None:
            logger.opt(exception=error).error("Consumer service terminated with an error")
            return EXIT_FAILURE

        logger.info(f"Consumer service stopped ({self._service.state.name.lower()})")
        return EXIT_OK

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop,
                                 signals: 'asyncio.Queue[Any]') -> Dict[signal.Signals, Any]:
        """
        Forward termination signals into the queue.

        Returns:
            Signal to the process-wide handler it replaced, or LOOP_HANDLER
            where the handler was registered on the loop
        """
        registered: Dict[signal.Signals, Any] = {}
        for sig in TERMINATION_SIGNALS:
            try:
                loop.add_signal_handler(sig, signals.put_nowait, sig)
            except NotImplementedError:
                # No loop signal support (Windows): use the process-wide handler
                registered[sig] = signal.signal(
                    sig, lambda signum, frame: loop.call_soon_threadsafe(
                        signals.put_nowait, signal.Signals(signum)))
                continue
            registered[sig] = LOOP_HANDLER
        return registered

    def _remove_signal_handlers(self, loop: asyncio.AbstractEventLoop,
                                registered: Dict[signal.Signals, Any]) -> None:
        for sig, previous in registered.items():
            if previous is LOOP_HANDLER:
                loop.remove_signal_handler(sig)
            else:
                # None means the previous handler was not installed from Python
                signal.signal(sig, signal.SIG_DFL if previous is None else previous)
