"""
In-memory Channel Transport

Process-local stand-in for the radio network, used by local runs and tests.
Payloads are encoded on transmit so receivers see bytes, as on a real wire.
"""

import time
from typing import Any, Dict, List, Mapping

from anyio import WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from src.platform.codec.document_codec import DocumentCodec
from src.platform.logging.loguru_io import Logger
from src.platform.transport.i_channel_transport import IChannelTransport, InboundMessage


class InMemoryChannelTransport(IChannelTransport):
    """
    In-memory broadcast medium

    Architecture:
    - Each channel has a list of subscriber stream tuples
    - transmit() fans out to every subscriber of the channel
    - Drop policy: a full subscriber stream loses the message (WouldBlock)
    """

    def __init__(self, *, max_buffer_size: int = 100, use_binary: bool = False) -> None:
        self._max_buffer_size = max_buffer_size
        self._use_binary = use_binary
        # channel -> list of (send_stream, receive_stream) tuples
        self._subscribers: Dict[
            int,
            List[
                tuple[
                    MemoryObjectSendStream[InboundMessage],
                    MemoryObjectReceiveStream[InboundMessage],
                ]
            ],
        ] = {}

    async def subscribe(self, *, channel: int) -> MemoryObjectReceiveStream[InboundMessage]:
        send_stream, receive_stream = create_memory_object_stream[InboundMessage](
            max_buffer_size=self._max_buffer_size
        )
        self._subscribers.setdefault(channel, []).append((send_stream, receive_stream))

        Logger.base.debug(
            f'📡 [TRANSPORT] Subscribed to channel {channel} '
            f'(total subscribers: {len(self._subscribers[channel])})'
        )
        return receive_stream

    async def transmit(
        self, *, channel: int, reply_channel: int, document: Mapping[str, Any]
    ) -> None:
        subscribers = self._subscribers.get(channel)
        if not subscribers:
            Logger.base.debug(f'📡 [TRANSPORT] No listeners on channel {channel}')
            return

        payload = DocumentCodec.encode(document=document, use_binary=self._use_binary)
        message = InboundMessage(
            channel=channel,
            reply_channel=reply_channel,
            payload=payload,
            received_at=time.time(),
        )

        delivered = 0
        dropped = 0
        for send_stream, _ in subscribers:
            try:
                send_stream.send_nowait(message)
                delivered += 1
            except WouldBlock:
                dropped += 1
                Logger.base.warning(
                    f'⚠️ [TRANSPORT] Stream full on channel {channel}, dropping message '
                    f'from reply channel {reply_channel}'
                )

        Logger.base.debug(
            f'📡 [TRANSPORT] Transmit on channel {channel}: delivered={delivered}, dropped={dropped}'
        )

    async def unsubscribe(
        self, *, channel: int, stream: MemoryObjectReceiveStream[InboundMessage]
    ) -> None:
        if channel not in self._subscribers:
            return

        subscribers = self._subscribers[channel]
        for i, (send_stream, receive_stream) in enumerate(subscribers):
            if receive_stream is stream:
                await send_stream.aclose()
                await receive_stream.aclose()
                subscribers.pop(i)
                break

        if not subscribers:
            del self._subscribers[channel]

    async def aclose(self) -> None:
        for channel in list(self._subscribers):
            for send_stream, receive_stream in self._subscribers.pop(channel):
                await send_stream.aclose()
                await receive_stream.aclose()
