"""
Broadcast Snapshot Use Case
Render the current shop state and hand it to the transport
"""

from src.platform.logging.loguru_io import Logger
from src.platform.transport.i_channel_transport import IChannelTransport
from src.service.shared_kernel.app.codec.snapshot_encoder import Document, SnapshotEncoder
from src.service.shared_kernel.domain.shop_sync_protocol import (
    REPLY_CHANNEL_MODULUS,
    SHOPSYNC_CHANNEL,
    reply_channel_for,
)
from src.service.shop_broadcast.app.interface.i_shop_state_provider import IShopStateProvider


class BroadcastSnapshotUseCase:
    def __init__(
        self,
        *,
        state_provider: IShopStateProvider,
        transport: IChannelTransport,
        channel: int = SHOPSYNC_CHANNEL,
        reply_channel_modulus: int = REPLY_CHANNEL_MODULUS,
    ) -> None:
        self.state_provider = state_provider
        self.transport = transport
        self.channel = channel
        self.reply_channel_modulus = reply_channel_modulus

    @Logger.io
    async def execute(self) -> Document:
        snapshot = self.state_provider.get_snapshot()
        document = SnapshotEncoder.render(snapshot)
        reply_channel = reply_channel_for(
            self.state_provider.computer_id, modulus=self.reply_channel_modulus
        )

        await self.transport.transmit(
            channel=self.channel, reply_channel=reply_channel, document=document
        )
        Logger.base.info(
            f'📡 [BROADCASTER] Sent {snapshot.info.name!r} on channel {self.channel} '
            f'(reply {reply_channel}, {len(snapshot.listings)} listings)'
        )
        return document
