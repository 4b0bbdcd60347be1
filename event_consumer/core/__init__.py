"""
Core module containing the consumer service, domain models, and collaborator interfaces.

This module is independent of the concrete broker client, telemetry backend
and configuration sources, which live in the infrastructure layer.
"""

from .interfaces.lifecycle import IStartable, IStoppable, IHealthCheckable
from .interfaces.messaging import IMessagingAdapter, Subscription
from .interfaces.telemetry import ITelemetryClient, Severity
from .domain.envelope import Envelope, ValidMessage, DeliveryError
from .domain.state import ServiceState, TerminationCause
from .services.consumer import ConsumerService
from .exceptions import ConsumerError, SubscriptionError, ServiceStateError, ConfigurationError

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
    "ConsumerError",
    "SubscriptionError",
    "ServiceStateError",
    "ConfigurationError",
]
