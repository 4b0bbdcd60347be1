"""
Telemetry interfaces for structured trace and error emission.

The correlation id travels as an explicit argument on every call rather
than through ambient context.
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Mapping, Optional, Union


class Severity(IntEnum):
    """Telemetry severity levels."""
    VERBOSE = 0
    INFORMATION = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4


class ITelemetryClient(ABC):
    """
    Interface for telemetry sinks.

    Calls are synchronous and must return quickly: they run inside the
    consumer's event loop between message reads.
    """

    @abstractmethod
    def track_trace(self,
                    message: str,
                    severity: Severity = Severity.INFORMATION,
                    operation_id: Optional[str] = None,
                    properties: Optional[Mapping[str, str]] = None) -> None:
        """
        Emit a trace event.

        Args:
            message: Event description
            severity: Event severity
            operation_id: Correlation id of the unit of work, if any
            properties: Additional string key/value properties
        """
        pass

    @abstractmethod
    def track_exception(self,
                        message: str,
                        error: Union[BaseException, str, None],
                        severity: Severity = Severity.ERROR,
                        operation_id: Optional[str] = None,
                        properties: Optional[Mapping[str, str]] = None) -> None:
        """
        Emit an error event.

        Args:
            message: Event description
            error: The failure, as an exception or its text
            severity: Event severity
            operation_id: Correlation id of the unit of work, if any
            properties: Additional string key/value properties
        """
        pass
