"""
Shop Listener Service Entry Point

Usage:
    PYTHONPATH=$PWD python -m src.service.shop_listener.main

Collects every ShopSync broadcast on the channel and keeps the latest
snapshot per shop until SIGINT/SIGTERM.
"""

import signal

import anyio

from src.platform.config.di import container
from src.platform.logging.loguru_io import Logger
from src.platform.state.redis_client import redis_client


def log_registry_summary() -> None:
    registry = container.snapshot_registry()
    use_case = container.receive_shop_sync_use_case()
    Logger.base.info(
        f'📊 [Shop Listener] {registry.count()} shops known, '
        f'{use_case.accepted_count} accepted, '
        f'{sum(use_case.rejected_count.values())} rejected'
    )
    for record in registry.list_all():
        Logger.base.info(
            f'🛒 [Shop Listener] {record.identity}: '
            f'{len(record.snapshot.sell_listings)} sell / '
            f'{len(record.snapshot.buy_listings)} buy listings'
        )


async def main() -> None:
    Logger.base.info('🚀 [Shop Listener] Starting...')
    settings = container.config_service()

    if settings.TRANSPORT_BACKEND == 'redis':
        await redis_client.initialize()
        Logger.base.info('📡 [Shop Listener] Redis initialized')

    shutdown_event = anyio.Event()

    try:
        with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:

            async def signal_watcher() -> None:
                async for signum in signals:
                    Logger.base.info(f'🛑 [Shop Listener] Received signal {signum}')
                    shutdown_event.set()
                    break

            async with anyio.create_task_group() as tg:
                container.task_group.override(tg)
                tg.start_soon(signal_watcher)  # type: ignore[arg-type]

                subscriber = container.shop_sync_subscriber()
                await subscriber.start(task_group=tg)

                await shutdown_event.wait()
                Logger.base.info('🛑 [Shop Listener] Initiating graceful shutdown...')
                await subscriber.stop()
                await container.channel_transport().aclose()
                tg.cancel_scope.cancel()

    finally:
        log_registry_summary()
        try:
            await redis_client.disconnect()
        except Exception as e:
            Logger.base.warning(f'⚠️ [Shop Listener] Error disconnecting Redis: {e}')
        Logger.base.info('👋 [Shop Listener] Shutdown complete')


if __name__ == '__main__':
    anyio.run(main)  # type: ignore[arg-type]
