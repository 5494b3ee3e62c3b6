import math
from typing import Optional

import attrs

from src.service.shared_kernel.domain.shop_sync_errors import MalformedListingError


@attrs.frozen
class PriceEntry:
    value: float
    currency: Optional[str] = None  # Short code, e.g. "KST"; unknown codes pass through
    address: Optional[str] = None
    required_meta: Optional[str] = None

    @property
    def is_free(self) -> bool:
        return self.value == 0

    @classmethod
    def create(
        cls,
        *,
        value: float,
        currency: Optional[str] = None,
        address: Optional[str] = None,
        required_meta: Optional[str] = None,
    ) -> 'PriceEntry':
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise MalformedListingError('price value must be a number')
        if isinstance(value, float) and not math.isfinite(value):
            raise MalformedListingError('price value must be finite')
        if value < 0:
            raise MalformedListingError('price value must not be negative')
        if value != 0 and not currency:
            raise MalformedListingError('currency is required for a non-zero price')
        if required_meta is not None and address and address in required_meta:
            raise MalformedListingError('requiredMeta must not repeat the payment address')
        return cls(value=value, currency=currency, address=address, required_meta=required_meta)
