"""
Configuration models and data structures.

This module defines the configuration models used throughout the application,
providing type safety and validation for configuration values.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ...core.exceptions import ConfigurationError

MESSAGING_BACKENDS = ("memory", "mqtt")


@dataclass
class MessagingConfig:
    """Message stream adapter configuration."""
    backend: str = "mqtt"
    broker_host: str = "localhost"
    broker_port: int = 1883
    topics: List[str] = field(default_factory=lambda: ["events/#"])
    client_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    qos: int = 1
    keepalive: int = 60
    connect_timeout: float = 30.0


@dataclass
class TelemetryConfig:
    """Telemetry sink configuration."""
    service_name: str = "Consumer"
    instrumentation_key: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = ("{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
                   "{name}:{function}:{line} - {message} | {extra}")
    log_directory: str = "logs"
    rotation: str = "10 MB"
    retention: str = "10 days"
    console_enabled: bool = True
    file_enabled: bool = False


@dataclass
class ServiceConfig:
    """Process entrypoint configuration."""
    keepalive_interval: float = 120.0


@dataclass
class ApplicationConfig:
    """Main application configuration."""

    name: str = "Event Consumer"
    version: str = "0.1.0"
    debug: bool = False
    environment: str = "production"

    messaging: MessagingConfig = field(default_factory=MessagingConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)

    config_file_path: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate_messaging()
        self._validate_intervals()

    def _validate_messaging(self) -> None:
        """Validate the message stream settings."""
        messaging = self.messaging

        if messaging.backend not in MESSAGING_BACKENDS:
            raise ConfigurationError(
                f"Unknown messaging backend '{messaging.backend}', "
                f"expected one of {', '.join(MESSAGING_BACKENDS)}")

        if not (1 <= messaging.broker_port <= 65535):
            raise ConfigurationError(
                f"Broker port must be between 1 and 65535, got {messaging.broker_port}")

        if messaging.qos not in (0, 1, 2):
            raise ConfigurationError(f"QoS must be 0, 1 or 2, got {messaging.qos}")

        if messaging.backend == "mqtt":
            if not messaging.broker_host:
                raise ConfigurationError("Broker host is required for the mqtt backend")
            if not messaging.topics:
                raise ConfigurationError("At least one topic is required for the mqtt backend")

    def _validate_intervals(self) -> None:
        """Validate timeout and interval values."""
        intervals = [
            ("Keep-alive interval", self.service.keepalive_interval),
            ("Broker keepalive", self.messaging.keepalive),
            ("Broker connect timeout", self.messaging.connect_timeout),
        ]

        for name, value in intervals:
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ApplicationConfig':
        """Create configuration from dictionary."""
        try:
            return cls(
                name=data.get('name', 'Event Consumer'),
                version=data.get('version', '0.1.0'),
                debug=data.get('debug', False),
                environment=data.get('environment', 'production'),
                messaging=MessagingConfig(**data.get('messaging', {})),
                telemetry=TelemetryConfig(**data.get('telemetry', {})),
                logging=LoggingConfig(**data.get('logging', {})),
                service=ServiceConfig(**data.get('service', {})),
                config_file_path=data.get('config_file_path'),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
