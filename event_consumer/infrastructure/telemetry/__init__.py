"""
Telemetry infrastructure.
"""

from .client import LoguruTelemetryClient, create_telemetry_client

__all__ = [
    "LoguruTelemetryClient",
    "create_telemetry_client",
]
