"""Shared Kernel Value Objects"""

from src.service.shared_kernel.domain.value_object.item_ref import ItemRef
from src.service.shared_kernel.domain.value_object.location import Location, Software
from src.service.shared_kernel.domain.value_object.price_entry import PriceEntry
from src.service.shared_kernel.domain.value_object.shop_identity import ShopIdentity

__all__ = ['ItemRef', 'Location', 'PriceEntry', 'ShopIdentity', 'Software']
