import anyio

from src.platform.exception.exceptions import ConfigurationError
from src.platform.logging.loguru_io import Logger
from src.service.shop_broadcast.driven_adapter.state.shop_state_holder import ShopStateHolder
from src.service.shop_broadcast.driving_adapter.shop_definition_loader import ShopDefinitionLoader


class ShopDefinitionWatcher:
    """Poll the definition file and push edits into the live shop state"""

    def __init__(
        self,
        *,
        loader: ShopDefinitionLoader,
        state_holder: ShopStateHolder,
        poll_interval: float = 5.0,
    ) -> None:
        self.loader = loader
        self.state_holder = state_holder
        self.poll_interval = poll_interval
        self._last_modified = loader.modified_at()

    async def check_once(self) -> bool:
        """Reload when the file changed; True if the shop state was replaced"""
        modified = self.loader.modified_at()
        if modified is None or modified == self._last_modified:
            return False
        self._last_modified = modified

        try:
            definition = self.loader.load()
        except ConfigurationError as e:
            # Keep advertising the last good state
            Logger.base.warning(f'⚠️ [SHOP DEFINITION] Reload skipped: {e.message}')
            return False

        if definition.computer_id != self.state_holder.computer_id:
            Logger.base.warning(
                f'⚠️ [SHOP DEFINITION] computerID change to {definition.computer_id} '
                'needs a restart, ignored'
            )
            return False

        await self.state_holder.replace(definition.snapshot)
        Logger.base.info(f'🔄 [SHOP DEFINITION] Reloaded {self.loader.path.name}')
        return True

    async def run(self) -> None:
        if self.poll_interval <= 0:
            return
        Logger.base.info(
            f'👀 [SHOP DEFINITION] Watching {self.loader.path} every {self.poll_interval}s'
        )
        while True:
            await anyio.sleep(self.poll_interval)
            await self.check_once()
