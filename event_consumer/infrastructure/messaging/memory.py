"""
In-process message stream adapter.

Backs the subscription with an asyncio queue fed through ``publish``. Used
for local runs without a broker and as a test double.
"""

import asyncio
from typing import Any, Optional, Union

from loguru import logger

from ...core.domain.envelope import DeliveryError, Envelope, ValidMessage
from ...core.exceptions import SubscriptionError
from ...core.interfaces.messaging import IMessagingAdapter, Subscription


class InMemoryMessagingAdapter(IMessagingAdapter):
    """Message stream adapter over an in-process queue."""

    def __init__(self, subscribe_error: Optional[Exception] = None) -> None:
        self._subscribe_error = subscribe_error
        self._queue: Optional['asyncio.Queue[Envelope]'] = None
        self._delivering = False
        self._closed = False
        self.subscribe_count = 0
        self.cancel_count = 0
        self.close_count = 0

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_delivering(self) -> bool:
        return self._delivering

    async def subscribe(self) -> Subscription:
        self.subscribe_count += 1
        if self._subscribe_error is not None:
            raise self._subscribe_error
        if self._closed:
            raise SubscriptionError("Adapter is closed")
        if self._queue is not None:
            raise SubscriptionError("Adapter is already subscribed")

        self._queue = asyncio.Queue()
        self._delivering = True
        logger.debug("In-memory subscription opened")
        return Subscription(messages=self._queue, cancel=self._cancel)

    async def close(self) -> None:
        self.close_count += 1
        if self._closed:
            return
        self._closed = True
        self._delivering = False
        logger.debug("In-memory adapter closed")

    def publish(self, envelope: Envelope) -> bool:
        """
        Deliver an envelope to the subscriber.

        Returns:
            False if there is no active subscription and the envelope was dropped
        """
        if not self._delivering or self._queue is None:
            return False
        self._queue.put_nowait(envelope)
        return True

    def publish_message(self, status: str, command: str, payload: Any = None,
                        operation_id: Optional[str] = None) -> bool:
        """Deliver a valid message built from its fields."""
        if operation_id is None:
            return self.publish(ValidMessage(status=status, command=command, payload=payload))
        return self.publish(ValidMessage(
            operation_id=operation_id, status=status, command=command, payload=payload))

    def publish_error(self, error: Union[BaseException, str],
                      operation_id: Optional[str] = None) -> bool:
        """Deliver a delivery-error envelope."""
        if operation_id is None:
            return self.publish(DeliveryError(error=error))
        return self.publish(DeliveryError(operation_id=operation_id, error=error))

    def _cancel(self) -> None:
        self.cancel_count += 1
        self._delivering = False
