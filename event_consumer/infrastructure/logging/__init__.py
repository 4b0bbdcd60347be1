"""
Logging infrastructure for the application.

This module provides centralized loguru configuration for the consumer process.
"""

from .setup import InterceptHandler, setup_logging

__all__ = [
    "setup_logging",
    "InterceptHandler",
]
