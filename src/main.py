"""
Local ShopSync Node

Runs the shop broadcaster and the shop listener in one process. With the
default in-memory transport the listener hears the local shop, which makes
this the quickest way to watch a definition go on the air.

Usage:
    PYTHONPATH=$PWD python -m src.main
"""

import signal

import anyio

from src.platform.config.di import container
from src.platform.logging.loguru_io import Logger
from src.platform.state.redis_client import redis_client
from src.service.shop_broadcast.main import build_definition_loader, start_shop_broadcast
from src.service.shop_listener.main import log_registry_summary


async def main() -> None:
    Logger.base.info('🚀 [ShopSync Node] Starting up...')
    settings = container.config_service()

    loader = build_definition_loader(settings)
    definition = loader.load()

    if settings.TRANSPORT_BACKEND == 'redis':
        await redis_client.initialize()
        Logger.base.info('📡 [ShopSync Node] Redis initialized')

    shutdown_event = anyio.Event()

    try:
        with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:

            async def signal_watcher() -> None:
                async for signum in signals:
                    Logger.base.info(f'🛑 [ShopSync Node] Received signal {signum}')
                    shutdown_event.set()
                    break

            async with anyio.create_task_group() as tg:
                container.task_group.override(tg)
                tg.start_soon(signal_watcher)  # type: ignore[arg-type]

                # Listener first so the first broadcast is heard
                subscriber = container.shop_sync_subscriber()
                await subscriber.start(task_group=tg)
                scheduler = start_shop_broadcast(
                    task_group=tg, settings=settings, loader=loader, definition=definition
                )

                await shutdown_event.wait()
                Logger.base.info('🛑 [ShopSync Node] Shutting down...')
                scheduler.stop()
                await subscriber.stop()
                await container.channel_transport().aclose()
                tg.cancel_scope.cancel()

    finally:
        log_registry_summary()
        try:
            await redis_client.disconnect()
        except Exception as e:
            Logger.base.warning(f'⚠️ [ShopSync Node] Error disconnecting Redis: {e}')
        Logger.base.info('👋 [ShopSync Node] Shutdown complete')


if __name__ == '__main__':
    anyio.run(main)  # type: ignore[arg-type]
