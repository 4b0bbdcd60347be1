"""
MQTT message stream adapter.

Connects to an MQTT broker with paho-mqtt, subscribes to the configured
topics and turns every inbound publish into an envelope. paho runs its
network loop on a background thread; envelopes are handed to the asyncio
loop with ``call_soon_threadsafe`` so the queue is only touched from the
loop thread.

Expected payload: a JSON object such as

    {"operation_id": "3f0c...", "status": "ok", "command": "process", "data": {...}}

``operationID`` and ``operationId`` are accepted as aliases, and ``payload``
as an alias of ``data``.
"""

import asyncio
import json
import uuid
from typing import Any, Dict, List, Optional

import paho.mqtt.client as mqtt
from loguru import logger

from ...core.domain.envelope import DeliveryError, Envelope, ValidMessage
from ...core.exceptions import SubscriptionError
from ...core.interfaces.messaging import IMessagingAdapter, Subscription
from ..config.models import MessagingConfig

OPERATION_ID_KEYS = ("operation_id", "operationID", "operationId")


def decode_envelope(payload: bytes) -> Envelope:
    """
    Decode an MQTT payload into an envelope.

    Undecodable payloads become delivery errors rather than raising, so the
    consumer can report and skip them.
    """
    try:
        document = json.loads(payload.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        return DeliveryError(error=f"decode failed: {e}")

    if not isinstance(document, dict):
        return DeliveryError(
            error=f"decode failed: expected a JSON object, got {type(document).__name__}")

    operation_id = _operation_id(document)
    return ValidMessage(
        operation_id=operation_id,
        status=str(document.get('status') or ""),
        command=str(document.get('command') or ""),
        payload=document.get('data', document.get('payload')),
    )


def _operation_id(document: Dict[str, Any]) -> str:
    for key in OPERATION_ID_KEYS:
        value = document.get(key)
        if value:
            return str(value)
    return str(uuid.uuid4())


class MQTTMessagingAdapter(IMessagingAdapter):
    """Message stream adapter for an MQTT broker."""

    def __init__(self, config: MessagingConfig) -> None:
        self._config = config
        self._client: Optional[mqtt.Client] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional['asyncio.Queue[Envelope]'] = None
        self._connected: Optional['asyncio.Future[Any]'] = None
        self._delivering = False
        self._closed = False

    @property
    def topics(self) -> List[str]:
        return list(self._config.topics)

    async def subscribe(self) -> Subscription:
        """
        Connect to the broker and subscribe to the configured topics.

        Raises:
            SubscriptionError: If the adapter is closed or already
                subscribed, or the broker cannot be reached
        """
        if self._closed:
            raise SubscriptionError("Adapter is closed")
        if self._client is not None:
            raise SubscriptionError("Adapter is already subscribed")

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._connected = self._loop.create_future()
        self._client = self._create_client()
        self._delivering = True

        host, port = self._config.broker_host, self._config.broker_port
        logger.info(f"Connecting to MQTT broker {host}:{port}")

        try:
            await self._loop.run_in_executor(
                None, self._client.connect, host, port, self._config.keepalive)
            self._client.loop_start()
            await asyncio.wait_for(
                asyncio.shield(self._connected), self._config.connect_timeout)
        except asyncio.TimeoutError as e:
            await self._teardown_client()
            raise SubscriptionError(
                f"Timed out connecting to MQTT broker {host}:{port}") from e
        except SubscriptionError:
            await self._teardown_client()
            raise
        except OSError as e:
            await self._teardown_client()
            raise SubscriptionError(
                f"Failed to connect to MQTT broker {host}:{port}: {e}") from e
        except Exception as e:
            # paho rejects bad arguments (empty host, invalid port) with ValueError
            await self._teardown_client()
            raise SubscriptionError(
                f"Failed to start MQTT client for {host}:{port}: {e}") from e

        return Subscription(messages=self._queue, cancel=self._cancel)

    async def close(self) -> None:
        """Disconnect from the broker. Subsequent calls do nothing."""
        if self._closed:
            return
        self._closed = True
        self._delivering = False
        await self._teardown_client()
        logger.info("MQTT adapter closed")

    def _create_client(self) -> mqtt.Client:
        client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=self._config.client_id or "",
        )
        if self._config.username:
            client.username_pw_set(self._config.username, self._config.password)

        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect
        client.on_message = self._on_message
        return client

    async def _teardown_client(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, client.disconnect)
        await loop.run_in_executor(None, client.loop_stop)

    def _cancel(self) -> None:
        """Stop delivering envelopes into the subscription queue."""
        if not self._delivering:
            return
        self._delivering = False
        if self._client is not None and self._client.is_connected():
            self._client.unsubscribe(self.topics)
        logger.debug("MQTT subscription cancelled")

    # paho callbacks, invoked on the network thread

    def _on_connect(self, client: mqtt.Client, userdata: Any, flags: Any,
                    reason_code: Any, properties: Any) -> None:
        if reason_code.is_failure:
            self._resolve_connect(SubscriptionError(
                f"MQTT broker refused connection: {reason_code}"))
            return

        # Resubscribe on every (re)connect; clean sessions drop subscriptions
        client.subscribe([(topic, self._config.qos) for topic in self._config.topics])
        logger.info(f"Subscribed to MQTT topics: {', '.join(self._config.topics)}")
        self._resolve_connect(None)

    def _on_disconnect(self, client: mqtt.Client, userdata: Any, flags: Any,
                       reason_code: Any, properties: Any) -> None:
        if reason_code.is_failure and not self._closed:
            logger.warning(f"Unexpected MQTT disconnection: {reason_code}")

    def _on_message(self, client: mqtt.Client, userdata: Any, message: mqtt.MQTTMessage) -> None:
        if not self._delivering or self._loop is None or self._queue is None:
            return
        if self._loop.is_closed():
            return
        envelope = decode_envelope(message.payload)
        self._loop.call_soon_threadsafe(self._queue.put_nowait, envelope)

    def _resolve_connect(self, error: Optional[Exception]) -> None:
        connected = self._connected
        if self._loop is None or connected is None or self._loop.is_closed():
            return

        def resolve() -> None:
            if connected.done():
                return
            if error is None:
                connected.set_result(True)
            else:
                connected.set_exception(error)

        self._loop.call_soon_threadsafe(resolve)
