"""
Messaging interfaces for the inbound message stream.

The consumer service only depends on the subscribe/close contract defined
here. Broker connections, checkpointing and consumer-group mechanics belong
to the adapter implementations.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from ..domain.envelope import Envelope


@dataclass
class Subscription:
    """An open message stream."""

    messages: 'asyncio.Queue[Envelope]'
    """Envelopes in delivery order."""

    cancel: Callable[[], None]
    """Stops delivery into ``messages``."""


class IMessagingAdapter(ABC):
    """Interface for message stream adapters."""

    @abstractmethod
    async def subscribe(self) -> Subscription:
        """
        Open the message stream.

        Returns:
            Subscription owning the message source and its cancel function

        Raises:
            SubscriptionError: If the stream cannot be opened
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Release the adapter's connection.

        Implementations must tolerate being called more than once.
        """
        pass
