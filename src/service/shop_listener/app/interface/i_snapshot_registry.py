"""Snapshot Registry Interface (Port)"""

from abc import ABC, abstractmethod
from typing import Optional

from src.service.shared_kernel.domain.value_object.shop_identity import ShopIdentity
from src.service.shop_listener.app.dto.snapshot_record import SnapshotRecord


class ISnapshotRegistry(ABC):
    @abstractmethod
    def record(self, record: SnapshotRecord) -> bool:
        """
        Store a snapshot if it is the latest by arrival time for its shop

        Returns:
            True if stored, False if an entry that arrived later is kept

        Note:
            - Older snapshots are replaced, never merged
        """
        pass

    @abstractmethod
    def get(self, identity: ShopIdentity) -> Optional[SnapshotRecord]:
        pass

    @abstractmethod
    def list_all(self) -> list[SnapshotRecord]:
        """All known shops, most recently heard first"""
        pass

    @abstractmethod
    def count(self) -> int:
        pass
