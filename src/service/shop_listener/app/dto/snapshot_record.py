import attrs

from src.service.shared_kernel.app.dto.decode_result import DecodeResult, DecodeWarning
from src.service.shared_kernel.domain.entity.shop_snapshot import ShopSnapshot
from src.service.shared_kernel.domain.enum.identity_source import IdentitySource
from src.service.shared_kernel.domain.value_object.shop_identity import ShopIdentity


@attrs.frozen
class SnapshotRecord:
    """Latest accepted snapshot of one shop, as seen by this listener"""

    identity: ShopIdentity
    snapshot: ShopSnapshot
    identity_source: IdentitySource
    received_at: float
    warnings: tuple[DecodeWarning, ...] = attrs.field(factory=tuple, converter=tuple)

    @classmethod
    def from_result(cls, result: DecodeResult, *, received_at: float) -> 'SnapshotRecord':
        return cls(
            identity=result.identity,
            snapshot=result.snapshot,
            identity_source=result.identity_source,
            received_at=received_at,
            warnings=result.warnings,
        )
