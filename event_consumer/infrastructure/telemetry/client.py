"""
Telemetry sink backed by loguru.

Every event is a structured loguru record carrying the service name, the
correlation id and the event properties in ``extra``.
"""

from typing import Any, Mapping, Optional, Union

from loguru import logger

from ...core.interfaces.telemetry import ITelemetryClient, Severity
from ..config.models import TelemetryConfig

SEVERITY_LEVELS = {
    Severity.VERBOSE: "DEBUG",
    Severity.INFORMATION: "INFO",
    Severity.WARNING: "WARNING",
    Severity.ERROR: "ERROR",
    Severity.CRITICAL: "CRITICAL",
}


class LoguruTelemetryClient(ITelemetryClient):
    """Emits telemetry events as structured log records."""

    def __init__(self, service_name: str, instrumentation_key: Optional[str] = None) -> None:
        self._service_name = service_name
        self._instrumentation_key = instrumentation_key
        self._logger = logger.bind(service=service_name)

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def instrumentation_key(self) -> Optional[str]:
        return self._instrumentation_key

    def track_trace(self,
                    message: str,
                    severity: Severity = Severity.INFORMATION,
                    operation_id: Optional[str] = None,
                    properties: Optional[Mapping[str, str]] = None) -> None:
        self._bind(operation_id, properties).log(SEVERITY_LEVELS[severity], message)

    def track_exception(self,
                        message: str,
                        error: Union[BaseException, str, None],
                        severity: Severity = Severity.ERROR,
                        operation_id: Optional[str] = None,
                        properties: Optional[Mapping[str, str]] = None) -> None:
        bound = self._bind(operation_id, properties)
        level = SEVERITY_LEVELS[severity]

        if error is None:
            bound.log(level, message)
        elif isinstance(error, BaseException):
            bound.opt(exception=error).log(level, f"{message}: {error}")
        else:
            bound.log(level, f"{message}: {error}")

    def _bind(self, operation_id: Optional[str], properties: Optional[Mapping[str, str]]) -> Any:
        context: dict = {}
        if operation_id:
            context['operation_id'] = operation_id
        if properties:
            context['properties'] = dict(properties)
        return self._logger.bind(**context) if context else self._logger


def create_telemetry_client(config: TelemetryConfig) -> ITelemetryClient:
    """
    Create the telemetry client for the process.

    Args:
        config: Telemetry configuration
    """
    client = LoguruTelemetryClient(config.service_name, config.instrumentation_key)
    if client.instrumentation_key:
        logger.info(f"Telemetry instrumentation key configured for {client.service_name}")
    return client
