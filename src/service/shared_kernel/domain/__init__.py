"""Shared Kernel Domain Layer"""

from src.service.shared_kernel.domain.entity import (
    BuyListing,
    Listing,
    SellListing,
    ShopInfo,
    ShopSnapshot,
)
from src.service.shared_kernel.domain.value_object import (
    ItemRef,
    Location,
    PriceEntry,
    ShopIdentity,
    Software,
)

__all__ = [
    'BuyListing',
    'ItemRef',
    'Listing',
    'Location',
    'PriceEntry',
    'SellListing',
    'ShopIdentity',
    'ShopInfo',
    'ShopSnapshot',
    'Software',
]
