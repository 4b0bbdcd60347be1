"""
Message stream adapters.
"""

from ...core.interfaces.messaging import IMessagingAdapter
from ..config.models import MessagingConfig
from .memory import InMemoryMessagingAdapter
from .mqtt import MQTTMessagingAdapter, decode_envelope


def create_messaging_adapter(config: MessagingConfig) -> IMessagingAdapter:
    """
    Create the message stream adapter selected by ``config.backend``.

    Args:
        config: Messaging configuration
    """
    if config.backend == "memory":
        return InMemoryMessagingAdapter()
    if config.backend == "mqtt":
        return MQTTMessagingAdapter(config)
    raise ValueError(f"Unknown messaging backend: {config.backend}")


__all__ = [
    "InMemoryMessagingAdapter",
    "MQTTMessagingAdapter",
    "create_messaging_adapter",
    "decode_envelope",
]
