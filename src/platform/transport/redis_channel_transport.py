"""
Redis Channel Transport

Relays ShopSync broadcasts over Redis Pub/Sub so shops and listeners in
different processes share one channel space.

Channel format: {prefix}:{channel}            e.g. shopsync:9773
Message format: {'reply_channel': int, 'document': dict, 'sent_at': float}
"""

import contextlib
import time
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import anyio
from anyio import WouldBlock, create_memory_object_stream
from anyio.abc import TaskGroup
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from redis.asyncio import Redis as AsyncRedis

from src.platform.codec.document_codec import DocumentCodec
from src.platform.exception.exceptions import MalformedPayloadError
from src.platform.logging.loguru_io import Logger
from src.platform.state.redis_client import redis_client
from src.platform.transport.i_channel_transport import IChannelTransport, InboundMessage


PubSubClientFactory = Callable[[], Awaitable[AsyncRedis]]


class _Subscription:
    def __init__(
        self,
        *,
        channel: int,
        send_stream: MemoryObjectSendStream[InboundMessage],
        receive_stream: MemoryObjectReceiveStream[InboundMessage],
    ) -> None:
        self.channel = channel
        self.send_stream = send_stream
        self.receive_stream = receive_stream
        self.scope = anyio.CancelScope()


class RedisChannelTransport(IChannelTransport):
    def __init__(
        self,
        *,
        redis: AsyncRedis,
        task_group: Optional[TaskGroup] = None,
        channel_prefix: str = 'shopsync',
        use_binary: bool = False,
        max_buffer_size: int = 100,
        reconnect_delay: float = 5.0,
        pubsub_client_factory: Optional[PubSubClientFactory] = None,
    ) -> None:
        self._redis = redis
        self._task_group = task_group
        self._channel_prefix = channel_prefix
        self._use_binary = use_binary
        self._max_buffer_size = max_buffer_size
        self._reconnect_delay = reconnect_delay
        self._pubsub_client_factory = pubsub_client_factory or redis_client.create_pubsub_client
        self._subscriptions: Dict[int, _Subscription] = {}  # id(receive_stream) -> subscription

    def bind(self, *, task_group: TaskGroup) -> None:
        """Attach the task group that runs subscription loops (set by main)"""
        self._task_group = task_group

    def channel_name(self, channel: int) -> str:
        return f'{self._channel_prefix}:{channel}'

    async def transmit(
        self, *, channel: int, reply_channel: int, document: Mapping[str, Any]
    ) -> None:
        try:
            envelope = {
                'reply_channel': reply_channel,
                'document': dict(document),
                'sent_at': time.time(),
            }
            message = DocumentCodec.encode(document=envelope, use_binary=self._use_binary)
            receivers = await self._redis.publish(self.channel_name(channel), message)
            Logger.base.debug(
                f'📤 [TRANSPORT] Published on {self.channel_name(channel)}: receivers={receivers}'
            )
        except Exception as e:
            # Best-effort medium: a lost broadcast is superseded by the next one
            Logger.base.warning(f'⚠️ [TRANSPORT] Publish failed on channel {channel}: {e}')

    async def subscribe(self, *, channel: int) -> MemoryObjectReceiveStream[InboundMessage]:
        if self._task_group is None:
            raise RuntimeError('RedisChannelTransport needs bind(task_group=...) before subscribe')

        send_stream, receive_stream = create_memory_object_stream[InboundMessage](
            max_buffer_size=self._max_buffer_size
        )
        subscription = _Subscription(
            channel=channel, send_stream=send_stream, receive_stream=receive_stream
        )
        self._subscriptions[id(receive_stream)] = subscription
        self._task_group.start_soon(self._subscribe_loop, subscription)
        return receive_stream

    async def unsubscribe(
        self, *, channel: int, stream: MemoryObjectReceiveStream[InboundMessage]
    ) -> None:
        subscription = self._subscriptions.pop(id(stream), None)
        if subscription is None:
            return
        await self._close_subscription(subscription)

    async def aclose(self) -> None:
        for key in list(self._subscriptions):
            await self._close_subscription(self._subscriptions.pop(key))

    async def _close_subscription(self, subscription: _Subscription) -> None:
        subscription.scope.cancel()
        await subscription.send_stream.aclose()
        await subscription.receive_stream.aclose()

    async def _subscribe_loop(self, subscription: _Subscription) -> None:
        """Subscription loop with automatic reconnection"""
        name = self.channel_name(subscription.channel)
        with subscription.scope:
            while True:
                pubsub_client: Optional[AsyncRedis] = None
                try:
                    pubsub_client = await self._pubsub_client_factory()
                    pubsub = pubsub_client.pubsub()
                    try:
                        await pubsub.subscribe(name)
                        Logger.base.info(f'📡 [TRANSPORT] Subscribed to {name}')

                        async for message in pubsub.listen():
                            if message['type'] != 'message':
                                continue
                            try:
                                self._forward(subscription, message['data'])
                            except Exception as e:
                                Logger.base.error(
                                    f'❌ [TRANSPORT] Failed to relay message on {name}: {e}'
                                )
                    finally:
                        with anyio.CancelScope(shield=True):
                            await pubsub.unsubscribe(name)
                            await pubsub.aclose()

                except Exception as e:
                    Logger.base.error(f'❌ [TRANSPORT] Subscription error on {name}: {e}')
                    Logger.base.info(f'🔄 [TRANSPORT] Reconnecting in {self._reconnect_delay}s...')
                    await anyio.sleep(self._reconnect_delay)

                finally:
                    if pubsub_client is not None:
                        with anyio.CancelScope(shield=True), contextlib.suppress(Exception):
                            await pubsub_client.aclose()

    def _forward(self, subscription: _Subscription, data: Any) -> None:
        try:
            envelope = DocumentCodec.decode(raw_data=data)
        except MalformedPayloadError as e:
            Logger.base.warning(f'⚠️ [TRANSPORT] Unreadable relay message: {e}')
            return

        reply_channel = envelope.get('reply_channel')
        document = envelope.get('document')
        if isinstance(reply_channel, bool) or not isinstance(reply_channel, int):
            Logger.base.warning('⚠️ [TRANSPORT] Relay message without a reply channel, dropped')
            return

        message = InboundMessage(
            channel=subscription.channel,
            reply_channel=reply_channel,
            payload=document if document is not None else b'',
            received_at=time.time(),
        )
        try:
            subscription.send_stream.send_nowait(message)
        except WouldBlock:
            Logger.base.warning(
                f'⚠️ [TRANSPORT] Stream full on channel {subscription.channel}, dropping message'
            )
