"""
Event Consumer - consumption half of an event-driven microservice.

This package subscribes to an externally provided message stream, classifies
each inbound message, reports it through telemetry, and shuts down cleanly on
upstream cancellation, OS termination signals or a fatal subscription error.
"""

__version__ = "0.1.0"

# Public API exports
from .core.interfaces.lifecycle import IStartable, IStoppable, IHealthCheckable
from .core.interfaces.messaging import IMessagingAdapter, Subscription
from .core.interfaces.telemetry import ITelemetryClient, Severity
from .core.domain.envelope import Envelope, ValidMessage, DeliveryError
from .core.domain.state import ServiceState, TerminationCause
from .core.services.consumer import ConsumerService
from .application.startup import ApplicationStartup

__all__ = [
    "IStartable",
    "IStoppable",
    "IHealthCheckable",
    "IMessagingAdapter",
    "Subscription",
    "ITelemetryClient",
    "Severity",
    "Envelope",
    "ValidMessage",
    "DeliveryError",
    "ServiceState",
    "TerminationCause",
    "ConsumerService",
    "ApplicationStartup",
]
