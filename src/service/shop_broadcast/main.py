"""
Shop Broadcast Service Entry Point

Usage:
    PYTHONPATH=$PWD python -m src.service.shop_broadcast.main

Loads the shop definition (SHOP_DEFINITION_PATH), then advertises it on the
ShopSync channel under the broadcast scheduler's cadence until SIGINT/SIGTERM.
"""

from pathlib import Path
import signal

import anyio
from anyio.abc import TaskGroup

from src.platform.config.core_setting import Settings
from src.platform.config.di import container
from src.platform.logging.loguru_io import Logger
from src.platform.state.redis_client import redis_client
from src.platform.timer.anyio_timer_service import AnyioTimerService
from src.service.shop_broadcast.app.broadcast_scheduler import BroadcastScheduler
from src.service.shop_broadcast.app.command.broadcast_snapshot_use_case import (
    BroadcastSnapshotUseCase,
)
from src.service.shop_broadcast.driven_adapter.state.shop_state_holder import ShopStateHolder
from src.service.shop_broadcast.driving_adapter.shop_definition_loader import (
    ShopDefinition,
    ShopDefinitionLoader,
)
from src.service.shop_broadcast.driving_adapter.shop_definition_watcher import (
    ShopDefinitionWatcher,
)


def build_definition_loader(settings: Settings) -> ShopDefinitionLoader:
    return ShopDefinitionLoader(
        path=Path(settings.SHOP_DEFINITION_PATH),
        decoder=container.decoder(),
        computer_id_override=settings.SHOP_COMPUTER_ID,
    )


def start_shop_broadcast(
    *,
    task_group: TaskGroup,
    settings: Settings,
    loader: ShopDefinitionLoader,
    definition: ShopDefinition,
) -> BroadcastScheduler:
    """Wire state, use case and scheduler for one shop and arm the first broadcast"""
    state_holder = ShopStateHolder(
        snapshot=definition.snapshot, computer_id=definition.computer_id
    )
    broadcast_use_case = BroadcastSnapshotUseCase(
        state_provider=state_holder,
        transport=container.channel_transport(),
        channel=settings.SHOPSYNC_CHANNEL,
        reply_channel_modulus=settings.REPLY_CHANNEL_MODULUS,
    )
    scheduler = BroadcastScheduler(
        timer_service=AnyioTimerService(task_group=task_group),
        broadcast=broadcast_use_case.execute,
        cooldown=settings.BROADCAST_COOLDOWN_SECONDS,
        first_delay_min=settings.FIRST_BROADCAST_MIN_DELAY,
        first_delay_max=settings.FIRST_BROADCAST_MAX_DELAY,
        legacy_interval_broadcast=settings.LEGACY_INTERVAL_BROADCAST,
    )
    state_holder.set_change_listener(scheduler.notify_change)

    watcher = ShopDefinitionWatcher(
        loader=loader,
        state_holder=state_holder,
        poll_interval=settings.SHOP_DEFINITION_POLL_SECONDS,
    )
    scheduler.start()
    task_group.start_soon(watcher.run)  # type: ignore[arg-type]
    Logger.base.info(
        f'🏪 [Shop Broadcast] {definition.snapshot.info.name!r} '
        f'as computer {definition.computer_id}'
    )
    return scheduler


async def main() -> None:
    Logger.base.info('🚀 [Shop Broadcast] Starting...')
    settings = container.config_service()

    # Fail fast on a bad definition, before anything is on the air
    loader = build_definition_loader(settings)
    definition = loader.load()

    if settings.TRANSPORT_BACKEND == 'redis':
        await redis_client.initialize()
        Logger.base.info('📡 [Shop Broadcast] Redis initialized')

    shutdown_event = anyio.Event()

    try:
        with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:

            async def signal_watcher() -> None:
                async for signum in signals:
                    Logger.base.info(f'🛑 [Shop Broadcast] Received signal {signum}')
                    shutdown_event.set()
                    break

            async with anyio.create_task_group() as tg:
                container.task_group.override(tg)
                tg.start_soon(signal_watcher)  # type: ignore[arg-type]

                scheduler = start_shop_broadcast(
                    task_group=tg, settings=settings, loader=loader, definition=definition
                )

                await shutdown_event.wait()
                Logger.base.info('🛑 [Shop Broadcast] Initiating graceful shutdown...')
                scheduler.stop()
                await container.channel_transport().aclose()
                tg.cancel_scope.cancel()

    finally:
        try:
            await redis_client.disconnect()
        except Exception as e:
            Logger.base.warning(f'⚠️ [Shop Broadcast] Error disconnecting Redis: {e}')
        Logger.base.info('👋 [Shop Broadcast] Shutdown complete')


if __name__ == '__main__':
    anyio.run(main)  # type: ignore[arg-type]
