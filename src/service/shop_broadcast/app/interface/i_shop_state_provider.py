"""Shop State Provider Interface (Port)"""

from abc import ABC, abstractmethod

from src.service.shared_kernel.domain.entity.shop_snapshot import ShopSnapshot


class IShopStateProvider(ABC):
    """Read side of the live shop state, consulted at render time"""

    @property
    @abstractmethod
    def computer_id(self) -> int:
        """Computer ID the shop transmits under"""
        pass

    @abstractmethod
    def get_snapshot(self) -> ShopSnapshot:
        """
        Current point-in-time snapshot

        Note:
            - Never blocks; the returned snapshot is immutable
        """
        pass
