from typing import Iterable, Optional, Union

import attrs

from src.service.shared_kernel.domain.enum.listing_kind import ListingKind
from src.service.shared_kernel.domain.shop_sync_errors import MalformedListingError
from src.service.shared_kernel.domain.value_object.item_ref import ItemRef
from src.service.shared_kernel.domain.value_object.price_entry import PriceEntry


def _check_common(*, prices: tuple[PriceEntry, ...], stock: Optional[int]) -> None:
    if not prices:
        raise MalformedListingError('prices must contain at least one entry')
    if stock is not None:
        if isinstance(stock, bool) or not isinstance(stock, int):
            raise MalformedListingError('stock must be an integer')
        if stock < 0:
            raise MalformedListingError('stock must not be negative')


@attrs.frozen
class SellListing:
    """Normal listing: the shop hands out items for payment"""

    item: ItemRef
    prices: tuple[PriceEntry, ...] = attrs.field(converter=tuple)
    stock: Optional[int] = None
    dynamic_price: bool = False  # Only the next unit is guaranteed at the quoted price
    made_on_demand: bool = False
    requires_interaction: bool = False

    kind = ListingKind.SELL

    @property
    def effective_stock(self) -> Optional[int]:
        """None means produced on demand, so no fixed availability"""
        return None if self.made_on_demand else self.stock

    @classmethod
    def create(
        cls,
        *,
        item: ItemRef,
        prices: Iterable[PriceEntry],
        stock: Optional[int] = None,
        dynamic_price: bool = False,
        made_on_demand: bool = False,
        requires_interaction: bool = False,
    ) -> 'SellListing':
        prices = tuple(prices)
        _check_common(prices=prices, stock=stock)
        if stock is None and not made_on_demand:
            raise MalformedListingError('sell listing needs a stock unless madeOnDemand is set')
        if stock is not None and made_on_demand:
            raise MalformedListingError('sell listing cannot carry both stock and madeOnDemand')
        return cls(
            item=item,
            prices=prices,
            stock=stock,
            dynamic_price=dynamic_price,
            made_on_demand=made_on_demand,
            requires_interaction=requires_interaction,
        )


@attrs.frozen
class BuyListing:
    """Reverse shop listing: the shop accepts items and pays out"""

    item: ItemRef
    prices: tuple[PriceEntry, ...] = attrs.field(converter=tuple)
    stock: Optional[int] = None  # Current intake limit; ignored when no_limit
    dynamic_price: bool = False
    no_limit: bool = False

    kind = ListingKind.BUY

    @property
    def effective_limit(self) -> Optional[int]:
        """None means unbounded intake (payout-constrained only)"""
        return None if self.no_limit else self.stock

    @classmethod
    def create(
        cls,
        *,
        item: ItemRef,
        prices: Iterable[PriceEntry],
        stock: Optional[int] = None,
        dynamic_price: bool = False,
        no_limit: bool = False,
    ) -> 'BuyListing':
        prices = tuple(prices)
        _check_common(prices=prices, stock=stock)
        if stock is None and not no_limit:
            raise MalformedListingError('buy listing needs a stock limit unless noLimit is set')
        return cls(
            item=item,
            prices=prices,
            stock=stock,
            dynamic_price=dynamic_price,
            no_limit=no_limit,
        )


Listing = Union[SellListing, BuyListing]
