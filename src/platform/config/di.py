"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/providers/selector.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.state.redis_client import redis_client
from src.platform.transport.i_channel_transport import IChannelTransport
from src.platform.transport.in_memory_channel_transport import InMemoryChannelTransport
from src.platform.transport.redis_channel_transport import RedisChannelTransport
from src.service.shared_kernel.app.codec.document_decoder import ShopSyncDecoder
from src.service.shop_listener.app.command.receive_shop_sync_use_case import (
    ReceiveShopSyncUseCase,
)
from src.service.shop_listener.driven_adapter.state.latest_snapshot_registry_impl import (
    LatestSnapshotRegistryImpl,
)
from src.service.shop_listener.driving_adapter.shop_sync_subscriber import ShopSyncSubscriber


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Background task group (set by main.py)
    # Runs transport subscription loops and scheduler timers
    task_group = providers.Object(None)

    # Decoder is pure; one instance serves every message
    decoder = providers.Singleton(
        ShopSyncDecoder,
        reply_channel_modulus=config_service.provided.REPLY_CHANNEL_MODULUS,
    )

    # Transport, chosen by TRANSPORT_BACKEND ('memory' | 'redis')
    channel_transport: providers.Provider[IChannelTransport] = providers.Selector(
        config_service.provided.TRANSPORT_BACKEND,
        memory=providers.Singleton(
            InMemoryChannelTransport,
            use_binary=config_service.provided.USE_BINARY_CODEC,
        ),
        redis=providers.Singleton(
            RedisChannelTransport,
            redis=providers.Factory(redis_client.get_client),
            task_group=task_group,
            channel_prefix=config_service.provided.REDIS_CHANNEL_PREFIX,
            use_binary=config_service.provided.USE_BINARY_CODEC,
            reconnect_delay=config_service.provided.REDIS_RECONNECT_DELAY,
        ),
    )

    # Listener side
    snapshot_registry = providers.Singleton(LatestSnapshotRegistryImpl)
    receive_shop_sync_use_case = providers.Singleton(
        ReceiveShopSyncUseCase,
        decoder=decoder,
        registry=snapshot_registry,
    )
    shop_sync_subscriber = providers.Singleton(
        ShopSyncSubscriber,
        transport=channel_transport,
        use_case=receive_shop_sync_use_case,
        channel=config_service.provided.SHOPSYNC_CHANNEL,
    )


container = Container()


def cleanup() -> None:
    container.reset_singletons()
