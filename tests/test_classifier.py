"""
Tests for envelope classification.
"""

from event_consumer.core.domain.envelope import DeliveryError, ValidMessage
from event_consumer.core.interfaces.telemetry import Severity
from event_consumer.core.services.classifier import MessageClassifier


class TestMessageClassifier:
    """Test cases for MessageClassifier."""

    def test_valid_message_traced_as_information(self, telemetry) -> None:
        classifier = MessageClassifier(telemetry)

        assert classifier.classify(ValidMessage(operation_id="op-1", status="ok", command="run"))

        assert len(telemetry.events) == 1
        event = telemetry.events[0]
        assert event.kind == "trace"
        assert event.message == "Processing event"
        assert event.severity == Severity.INFORMATION
        assert event.operation_id == "op-1"
        assert event.properties == {"Status": "ok", "Command": "run"}

    def test_delivery_error_tracked_as_error(self, telemetry) -> None:
        classifier = MessageClassifier(telemetry)
        cause = ConnectionResetError("link dropped")

        assert not classifier.classify(DeliveryError(operation_id="op-2", error=cause))

        event = telemetry.events[0]
        assert event.kind == "exception"
        assert event.message == "Error processing message"
        assert event.severity == Severity.ERROR
        assert event.operation_id == "op-2"
        assert event.error is cause
        assert event.properties == {"Error": "link dropped"}

    def test_malformed_message_tracked_as_error(self, telemetry) -> None:
        classifier = MessageClassifier(telemetry)

        assert not classifier.classify(ValidMessage(operation_id="op-3", status="", command=""))

        event = telemetry.events[0]
        assert event.severity == Severity.ERROR
        assert event.operation_id == "op-3"
        assert event.properties["Missing"] == "status,command"
        assert "missing status, command" in str(event.error)

    def test_one_event_per_envelope(self, telemetry) -> None:
        classifier = MessageClassifier(telemetry)
        envelopes = [
            ValidMessage(status="ok", command="a"),
            DeliveryError(error="x"),
            ValidMessage(status="", command="b"),
        ]

        for envelope in envelopes:
            classifier.classify(envelope)

        assert [e.operation_id for e in telemetry.events] == \
            [e.operation_id for e in envelopes]
