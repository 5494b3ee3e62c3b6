"""Shared Kernel Entities"""

from src.service.shared_kernel.domain.entity.listing import BuyListing, Listing, SellListing
from src.service.shared_kernel.domain.entity.shop_snapshot import ShopInfo, ShopSnapshot

__all__ = ['BuyListing', 'Listing', 'SellListing', 'ShopInfo', 'ShopSnapshot']
