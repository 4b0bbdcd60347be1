"""
Domain models for the consumer service.

This module contains pure domain models without external dependencies:
the inbound envelope variants and the service lifecycle states.
"""

from .envelope import DeliveryError, Envelope, EnvelopeHandler, ValidMessage
from .state import ServiceState, TerminationCause

__all__ = [
    "Envelope",
    "EnvelopeHandler",
    "ValidMessage",
    "DeliveryError",
    "ServiceState",
    "TerminationCause",
]
