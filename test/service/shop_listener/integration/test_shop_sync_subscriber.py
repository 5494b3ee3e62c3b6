"""
Integration tests for the listener pipeline

InMemoryChannelTransport -> ShopSyncSubscriber -> ReceiveShopSyncUseCase ->
LatestSnapshotRegistryImpl, plus the broadcast use case on the sending side.
"""

import anyio
from anyio import fail_after
import pytest

from src.platform.transport.in_memory_channel_transport import InMemoryChannelTransport
from src.service.shared_kernel.app.codec.document_decoder import ShopSyncDecoder
from src.service.shared_kernel.domain.entity.shop_snapshot import ShopSnapshot
from src.service.shared_kernel.domain.value_object.shop_identity import ShopIdentity
from src.service.shop_broadcast.app.command.broadcast_snapshot_use_case import (
    BroadcastSnapshotUseCase,
)
from src.service.shop_broadcast.driven_adapter.state.shop_state_holder import ShopStateHolder
from src.service.shop_listener.app.command.receive_shop_sync_use_case import (
    ReceiveShopSyncUseCase,
)
from src.service.shop_listener.driven_adapter.state.latest_snapshot_registry_impl import (
    LatestSnapshotRegistryImpl,
)
from src.service.shop_listener.driving_adapter.shop_sync_subscriber import ShopSyncSubscriber
from test.shop_sync_documents import make_shop_document
from test.test_constants import SHOPSYNC_CHANNEL


async def _wait_until(predicate) -> None:
    with fail_after(1.0):
        while not predicate():
            await anyio.sleep(0.01)


class TestShopSyncSubscriber:
    @pytest.fixture
    def transport(self) -> InMemoryChannelTransport:
        return InMemoryChannelTransport()

    @pytest.fixture
    def registry(self) -> LatestSnapshotRegistryImpl:
        return LatestSnapshotRegistryImpl()

    @pytest.fixture
    def subscriber(
        self, transport, registry, decoder: ShopSyncDecoder
    ) -> ShopSyncSubscriber:
        return ShopSyncSubscriber(
            transport=transport,
            use_case=ReceiveShopSyncUseCase(decoder=decoder, registry=registry),
        )

    @pytest.mark.asyncio
    async def test_broadcast_reaches_registry(
        self, transport, registry, subscriber, shop_snapshot: ShopSnapshot
    ) -> None:
        holder = ShopStateHolder(snapshot=shop_snapshot, computer_id=272)
        broadcaster = BroadcastSnapshotUseCase(state_provider=holder, transport=transport)

        async with anyio.create_task_group() as tg:
            await subscriber.start(task_group=tg)
            await broadcaster.execute()

            await _wait_until(lambda: registry.count() == 1)
            await subscriber.stop()

        record = registry.get(shop_snapshot.identity(computer_id=272))
        assert record is not None
        assert record.snapshot == shop_snapshot

    @pytest.mark.asyncio
    async def test_rejected_message_does_not_stop_listening(
        self, transport, registry, subscriber
    ) -> None:
        async with anyio.create_task_group() as tg:
            await subscriber.start(task_group=tg)

            await transport.transmit(
                channel=SHOPSYNC_CHANNEL, reply_channel=1, document={'type': 'Other'}
            )
            await transport.transmit(
                channel=SHOPSYNC_CHANNEL,
                reply_channel=12345,
                document=make_shop_document(name='After'),
            )

            await _wait_until(lambda: registry.count() == 1)
            await subscriber.stop()

        assert registry.get(ShopIdentity(computer_id=12345, name='After')) is not None
        assert subscriber.use_case.rejected_count

    @pytest.mark.asyncio
    async def test_latest_broadcast_wins(self, transport, registry, subscriber) -> None:
        async with anyio.create_task_group() as tg:
            await subscriber.start(task_group=tg)

            for owner in ('first', 'second'):
                await transport.transmit(
                    channel=SHOPSYNC_CHANNEL,
                    reply_channel=7,
                    document=make_shop_document(name='Shop', owner=owner),
                )

            await _wait_until(lambda: subscriber.use_case.accepted_count == 2)
            await subscriber.stop()

        record = registry.get(ShopIdentity(computer_id=7, name='Shop'))
        assert record.snapshot.info.owner == 'second'

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self, subscriber) -> None:
        async with anyio.create_task_group() as tg:
            await subscriber.start(task_group=tg)
            await subscriber.stop()
            await subscriber.stop()
