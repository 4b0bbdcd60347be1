"""
Tests for the in-memory message stream adapter and the adapter factory.
"""

import pytest

from event_consumer.core.domain.envelope import DeliveryError, ValidMessage
from event_consumer.core.exceptions import SubscriptionError
from event_consumer.infrastructure.config.models import MessagingConfig
from event_consumer.infrastructure.messaging import (
    InMemoryMessagingAdapter,
    MQTTMessagingAdapter,
    create_messaging_adapter,
)


class TestInMemoryMessagingAdapter:
    """Test cases for InMemoryMessagingAdapter."""

    @pytest.mark.asyncio
    async def test_publish_before_subscribe_is_dropped(self, adapter) -> None:
        assert not adapter.publish_message(status="ok", command="run")

    @pytest.mark.asyncio
    async def test_subscribe_and_publish(self, adapter) -> None:
        subscription = await adapter.subscribe()

        assert adapter.is_delivering
        assert adapter.publish_message(status="ok", command="run", payload={"n": 1},
                                       operation_id="op-1")
        assert adapter.publish_error("broken", operation_id="op-2")

        first = subscription.messages.get_nowait()
        second = subscription.messages.get_nowait()
        assert isinstance(first, ValidMessage)
        assert first.operation_id == "op-1"
        assert first.payload == {"n": 1}
        assert isinstance(second, DeliveryError)
        assert second.error_text == "broken"

    @pytest.mark.asyncio
    async def test_cancel_stops_delivery(self, adapter) -> None:
        subscription = await adapter.subscribe()

        subscription.cancel()

        assert adapter.cancel_count == 1
        assert not adapter.is_delivering
        assert not adapter.publish(ValidMessage(status="ok", command="run"))
        assert subscription.messages.empty()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, adapter) -> None:
        await adapter.subscribe()

        await adapter.close()
        await adapter.close()

        assert adapter.is_closed
        assert adapter.close_count == 2

    @pytest.mark.asyncio
    async def test_subscribe_after_close(self, adapter) -> None:
        await adapter.close()
        with pytest.raises(SubscriptionError, match="closed"):
            await adapter.subscribe()

    @pytest.mark.asyncio
    async def test_subscribe_twice(self, adapter) -> None:
        await adapter.subscribe()
        with pytest.raises(SubscriptionError, match="already subscribed"):
            await adapter.subscribe()

    @pytest.mark.asyncio
    async def test_configured_subscribe_error(self) -> None:
        adapter = InMemoryMessagingAdapter(subscribe_error=TimeoutError("no broker"))

        with pytest.raises(TimeoutError):
            await adapter.subscribe()
        assert adapter.subscribe_count == 1


class TestCreateMessagingAdapter:
    """Test cases for the adapter factory."""

    def test_memory_backend(self) -> None:
        adapter = create_messaging_adapter(MessagingConfig(backend="memory"))
        assert isinstance(adapter, InMemoryMessagingAdapter)

    def test_mqtt_backend(self) -> None:
        adapter = create_messaging_adapter(MessagingConfig(topics=["a/#"]))
        assert isinstance(adapter, MQTTMessagingAdapter)
        assert adapter.topics == ["a/#"]

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Unknown messaging backend"):
            create_messaging_adapter(MessagingConfig(backend="kafka"))
