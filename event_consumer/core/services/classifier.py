"""
Envelope classification.

Turns each inbound envelope into exactly one telemetry event: an error for
delivery failures and malformed messages, an informational trace for valid
ones. Payload semantics are left to downstream processors.
"""

from ..domain.envelope import DeliveryError, Envelope, ValidMessage
from ..interfaces.telemetry import ITelemetryClient, Severity


class MessageClassifier:
    """Classifies envelopes and reports the outcome to telemetry."""

    def __init__(self, telemetry: ITelemetryClient) -> None:
        self._telemetry = telemetry

    def classify(self, envelope: Envelope) -> bool:
        """
        Classify one envelope.

        Returns:
            True if the envelope was a well-formed message, False if it was
            reported as an error and discarded
        """
        return envelope.accept(self)

    def on_valid_message(self, envelope: ValidMessage) -> bool:
        missing = envelope.missing_fields()
        if missing:
            self._telemetry.track_exception(
                "Error processing message",
                f"Malformed message: missing {', '.join(missing)}",
                Severity.ERROR,
                operation_id=envelope.operation_id,
                properties={"Error": "Malformed message", "Missing": ",".join(missing)},
            )
            return False

        self._telemetry.track_trace(
            "Processing event",
            Severity.INFORMATION,
            operation_id=envelope.operation_id,
            properties={"Status": envelope.status, "Command": envelope.command},
        )
        return True

    def on_delivery_error(self, envelope: DeliveryError) -> bool:
        self._telemetry.track_exception(
            "Error processing message",
            envelope.error,
            Severity.ERROR,
            operation_id=envelope.operation_id,
            properties={"Error": envelope.error_text},
        )
        return False
