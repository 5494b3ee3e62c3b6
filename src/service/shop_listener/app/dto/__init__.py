from src.service.shop_listener.app.dto.snapshot_record import SnapshotRecord

__all__ = ['SnapshotRecord']
