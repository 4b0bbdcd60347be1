"""
Application layer containing process wiring and startup logic.

This layer builds the infrastructure collaborators, hands them to the
consumer service and supervises it for the lifetime of the process.
"""

from .startup import EXIT_FAILURE, EXIT_OK, ApplicationStartup

__all__ = [
    "ApplicationStartup",
    "EXIT_OK",
    "EXIT_FAILURE",
]
