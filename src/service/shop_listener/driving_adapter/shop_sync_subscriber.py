from typing import Optional

import anyio
from anyio.abc import TaskGroup
from anyio.streams.memory import MemoryObjectReceiveStream

from src.platform.logging.loguru_io import Logger
from src.platform.transport.i_channel_transport import IChannelTransport, InboundMessage
from src.service.shared_kernel.domain.shop_sync_protocol import SHOPSYNC_CHANNEL
from src.service.shop_listener.app.command.receive_shop_sync_use_case import (
    ReceiveShopSyncUseCase,
)


class ShopSyncSubscriber:
    """Feed every broadcast on the ShopSync channel into the receive use case"""

    def __init__(
        self,
        *,
        transport: IChannelTransport,
        use_case: ReceiveShopSyncUseCase,
        channel: int = SHOPSYNC_CHANNEL,
    ) -> None:
        self.transport = transport
        self.use_case = use_case
        self.channel = channel
        self._stream: Optional[MemoryObjectReceiveStream[InboundMessage]] = None

    async def start(self, *, task_group: TaskGroup) -> None:
        """Subscribe and consume in the background"""
        self._stream = await self.transport.subscribe(channel=self.channel)
        task_group.start_soon(self._consume_loop, self._stream)
        Logger.base.info(f'🔔 [LISTENER] Listening on channel {self.channel}')

    async def stop(self) -> None:
        if self._stream is None:
            return
        await self.transport.unsubscribe(channel=self.channel, stream=self._stream)
        self._stream = None
        Logger.base.info(f'🔕 [LISTENER] Stopped listening on channel {self.channel}')

    async def _consume_loop(self, stream: MemoryObjectReceiveStream[InboundMessage]) -> None:
        try:
            async for message in stream:
                try:
                    await self.use_case.execute(message)
                except Exception as e:
                    # One broken message must not stop the listener
                    Logger.base.exception(f'❌ [LISTENER] Failed to handle message: {e}')
        except anyio.ClosedResourceError:
            pass
