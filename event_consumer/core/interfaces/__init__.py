"""
Core interfaces defining the contracts of the service's collaborators.

These interfaces provide the foundation for dependency inversion and enable
loose coupling between the consumer service and its adapters.
"""

from .lifecycle import IStartable, IStoppable, IHealthCheckable
from .messaging import IMessagingAdapter, Subscription
from .telemetry import ITelemetryClient, Severity

__all__ = [
    "IStartable",
    "IStoppable",
    "IHealthCheckable",
    "IMessagingAdapter",
    "Subscription",
    "ITelemetryClient",
    "Severity",
]
