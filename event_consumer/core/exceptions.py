"""
Exception hierarchy for the consumer service.

Only subscription failures cross the service boundary. Per-message errors
are absorbed by the service and reported through telemetry.
"""

from typing import Any, Optional


class ConsumerError(Exception):
    """Base class for consumer errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class SubscriptionError(ConsumerError):
    """Raised when the messaging adapter cannot open the stream."""
    pass


class ServiceStateError(ConsumerError):
    """Raised when a lifecycle operation is invalid for the current state."""
    pass


class ConfigurationError(ConsumerError, ValueError):
    """Raised when configuration is missing or invalid."""
    pass
