"""
Envelope domain models for inbound messages.

An envelope is one unit delivered by a messaging adapter. It is either a
valid message carrying classification fields and an opaque payload, or a
delivery error raised by the adapter while decoding or delivering it.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Protocol, TypeVar, Union

R = TypeVar('R', covariant=True)


class EnvelopeHandler(Protocol[R]):
    """Receiver for polymorphic envelope dispatch."""

    def on_valid_message(self, envelope: 'ValidMessage') -> R:
        ...

    def on_delivery_error(self, envelope: 'DeliveryError') -> R:
        ...


@dataclass(frozen=True)
class Envelope(ABC):
    """
    Base class for every envelope reaching the consumer service.

    The operation id links all telemetry emitted for one logical unit of
    work. Redelivery of the same unit reuses it.
    """

    operation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    """Correlation identifier."""

    @abstractmethod
    def accept(self, handler: 'EnvelopeHandler[R]') -> R:
        """Dispatch this envelope to the matching handler method."""


@dataclass(frozen=True)
class ValidMessage(Envelope):
    """A successfully delivered message."""

    status: str = ""
    command: str = ""
    payload: Any = None

    def accept(self, handler: 'EnvelopeHandler[R]') -> R:
        return handler.on_valid_message(self)

    def missing_fields(self) -> List[str]:
        """
        Names of classification fields that are empty.

        Only existence is checked; the payload belongs to downstream
        processing and is never inspected here.
        """
        missing = []
        if not self.status:
            missing.append("status")
        if not self.command:
            missing.append("command")
        return missing


@dataclass(frozen=True)
class DeliveryError(Envelope):
    """An envelope the adapter failed to decode or deliver."""

    error: Union[BaseException, str] = "unknown delivery error"

    def accept(self, handler: 'EnvelopeHandler[R]') -> R:
        return handler.on_delivery_error(self)

    @property
    def error_text(self) -> str:
        return str(self.error)
