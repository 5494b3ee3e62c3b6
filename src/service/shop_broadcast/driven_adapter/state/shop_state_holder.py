"""In-process holder of the live shop state"""

from typing import Awaitable, Callable, Iterable, Optional

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.listing import Listing
from src.service.shared_kernel.domain.entity.shop_snapshot import ShopSnapshot
from src.service.shop_broadcast.app.interface.i_shop_state_provider import IShopStateProvider


ChangeListener = Callable[[], Awaitable[None]]


class ShopStateHolder(IShopStateProvider):
    """
    Holds one immutable ShopSnapshot reference

    Mutations swap the reference in a single assignment, so a render running
    between two mutations always sees one consistent snapshot. Every swap is
    reported to the change listener (the broadcast scheduler).
    """

    def __init__(
        self,
        *,
        snapshot: ShopSnapshot,
        computer_id: int,
        change_listener: Optional[ChangeListener] = None,
    ) -> None:
        self._snapshot = snapshot
        self._computer_id = computer_id
        self._change_listener = change_listener
        self._revision = 0

    @property
    def computer_id(self) -> int:
        return self._computer_id

    @property
    def revision(self) -> int:
        return self._revision

    def get_snapshot(self) -> ShopSnapshot:
        return self._snapshot

    def set_change_listener(self, listener: Optional[ChangeListener]) -> None:
        self._change_listener = listener

    async def replace(self, snapshot: ShopSnapshot) -> None:
        if snapshot == self._snapshot:
            return

        self._snapshot = snapshot
        self._revision += 1
        Logger.base.debug(
            f'🏪 [SHOP STATE] Revision {self._revision}: {len(snapshot.listings)} listings'
        )
        if self._change_listener is not None:
            await self._change_listener()

    async def replace_listings(self, listings: Iterable[Listing]) -> None:
        await self.replace(self._snapshot.with_listings(listings))
