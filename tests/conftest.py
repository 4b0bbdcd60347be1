"""
Shared fixtures for the consumer test suite.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Union

import pytest
from loguru import logger

from event_consumer.core.interfaces.telemetry import ITelemetryClient, Severity
from event_consumer.infrastructure.messaging.memory import InMemoryMessagingAdapter


@dataclass
class TelemetryEvent:
    """One recorded telemetry call."""
    kind: str
    message: str
    severity: Severity
    operation_id: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)
    error: Union[BaseException, str, None] = None


class RecordingTelemetryClient(ITelemetryClient):
    """Telemetry client that records every call in order."""

    def __init__(self) -> None:
        self.events: List[TelemetryEvent] = []

    def track_trace(self,
                    message: str,
                    severity: Severity = Severity.INFORMATION,
                    operation_id: Optional[str] = None,
                    properties: Optional[Mapping[str, str]] = None) -> None:
        self.events.append(TelemetryEvent(
            "trace", message, severity, operation_id, dict(properties or {})))

    def track_exception(self,
                        message: str,
                        error: Union[BaseException, str, None],
                        severity: Severity = Severity.ERROR,
                        operation_id: Optional[str] = None,
                        properties: Optional[Mapping[str, str]] = None) -> None:
        self.events.append(TelemetryEvent(
            "exception", message, severity, operation_id, dict(properties or {}), error))

    def with_severity(self, severity: Severity) -> List[TelemetryEvent]:
        return [event for event in self.events if event.severity == severity]

    def message_events(self) -> List[TelemetryEvent]:
        """Events produced by envelope classification."""
        return [event for event in self.events if event.message in (
            "Processing event", "Error processing message")]


@pytest.fixture
def telemetry() -> RecordingTelemetryClient:
    """Create a recording telemetry client."""
    return RecordingTelemetryClient()


@pytest.fixture
def adapter() -> InMemoryMessagingAdapter:
    """Create an in-memory messaging adapter."""
    return InMemoryMessagingAdapter()


@pytest.fixture
def wait_until() -> Callable[..., Awaitable[None]]:
    """Poll a condition on the event loop until it holds."""

    async def _wait_until(predicate: Callable[[], Any], timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("Condition not met before timeout")
            await asyncio.sleep(0.005)

    return _wait_until


@pytest.fixture
def log_records() -> Iterator[List[Dict[str, Any]]]:
    """Capture loguru records emitted during the test."""
    records: List[Dict[str, Any]] = []
    sink_id = logger.add(lambda message: records.append(message.record), level=0)
    yield records
    logger.remove(sink_id)
