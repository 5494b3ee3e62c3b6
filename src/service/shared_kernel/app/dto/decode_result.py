from typing import Optional

import attrs

from src.service.shared_kernel.domain.entity.shop_snapshot import ShopSnapshot
from src.service.shared_kernel.domain.enum.error_kind import ErrorKind
from src.service.shared_kernel.domain.enum.identity_source import IdentitySource
from src.service.shared_kernel.domain.value_object.shop_identity import ShopIdentity


@attrs.frozen
class DecodeWarning:
    kind: ErrorKind
    reason: str
    index: Optional[int] = None  # 0-based position in `items` for listing warnings
    field_path: Optional[str] = None

    def __str__(self) -> str:
        where = f'items[{self.index}]' if self.index is not None else (self.field_path or '-')
        return f'{self.kind}: {where}: {self.reason}'


@attrs.frozen
class DecodeResult:
    snapshot: ShopSnapshot
    identity: ShopIdentity
    identity_source: IdentitySource
    warnings: tuple[DecodeWarning, ...] = attrs.field(factory=tuple, converter=tuple)

    @property
    def listing_warnings(self) -> tuple[DecodeWarning, ...]:
        return tuple(w for w in self.warnings if w.kind is ErrorKind.MALFORMED_LISTING)
