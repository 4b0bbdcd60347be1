"""
Configuration management infrastructure.

This module provides configuration loading and validation for the
consumer process.
"""

from .models import (
    ApplicationConfig,
    LoggingConfig,
    MessagingConfig,
    ServiceConfig,
    TelemetryConfig,
)
from .loader import ConfigLoader

__all__ = [
    "ApplicationConfig",
    "MessagingConfig",
    "TelemetryConfig",
    "LoggingConfig",
    "ServiceConfig",
    "ConfigLoader",
]
