"""
Service lifecycle states and termination causes.
"""

from enum import Enum, auto


class ServiceState(Enum):
    """Lifecycle of the consumer service."""
    CREATED = auto()      # Constructed, not yet subscribed
    SUBSCRIBED = auto()   # Stream open, event loop running
    TERMINATING = auto()  # A termination trigger fired
    STOPPED = auto()      # Adapter closed, start() has returned


class TerminationCause(Enum):
    """What ended the event loop."""
    CONTEXT_CANCELLED = auto()
    SIGNAL = auto()
    STOP_REQUESTED = auto()

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    TerminationCause.CONTEXT_CANCELLED: "Context canceled. Stopping event listener.",
    TerminationCause.SIGNAL: "Received termination signal",
    TerminationCause.STOP_REQUESTED: "Stop requested. Stopping event listener.",
}
