from typing import Optional

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.value_object.shop_identity import ShopIdentity
from src.service.shop_listener.app.dto.snapshot_record import SnapshotRecord
from src.service.shop_listener.app.interface.i_snapshot_registry import ISnapshotRegistry


class LatestSnapshotRegistryImpl(ISnapshotRegistry):
    """In-memory registry keyed by ShopIdentity; last arrival wins"""

    def __init__(self) -> None:
        self._records: dict[ShopIdentity, SnapshotRecord] = {}

    def record(self, record: SnapshotRecord) -> bool:
        current = self._records.get(record.identity)
        if current is not None and current.received_at > record.received_at:
            Logger.base.debug(f'🗂️ [REGISTRY] Stale snapshot for {record.identity} ignored')
            return False

        self._records[record.identity] = record
        return True

    def get(self, identity: ShopIdentity) -> Optional[SnapshotRecord]:
        return self._records.get(identity)

    def list_all(self) -> list[SnapshotRecord]:
        return sorted(self._records.values(), key=lambda r: r.received_at, reverse=True)

    def count(self) -> int:
        return len(self._records)
