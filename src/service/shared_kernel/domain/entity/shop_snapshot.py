from typing import Iterable, Optional

import attrs

from src.service.shared_kernel.domain.entity.listing import BuyListing, Listing, SellListing
from src.service.shared_kernel.domain.value_object.location import Location, Software
from src.service.shared_kernel.domain.value_object.shop_identity import ShopIdentity


@attrs.frozen
class ShopInfo:
    name: str
    description: Optional[str] = None
    owner: Optional[str] = None
    computer_id: Optional[int] = None
    multi_shop: Optional[int] = None
    software: Optional[Software] = None
    location: Optional[Location] = None
    other_locations: tuple[Location, ...] = attrs.field(factory=tuple, converter=tuple)


@attrs.frozen
class ShopSnapshot:
    """One sender's complete advertised state at a point in time.

    Built fresh for each broadcast or each inbound message and never
    mutated; callers derive a new snapshot with attrs.evolve instead.
    """

    info: ShopInfo
    listings: tuple[Listing, ...] = attrs.field(factory=tuple, converter=tuple)

    @property
    def sell_listings(self) -> tuple[SellListing, ...]:
        return tuple(listing for listing in self.listings if isinstance(listing, SellListing))

    @property
    def buy_listings(self) -> tuple[BuyListing, ...]:
        return tuple(listing for listing in self.listings if isinstance(listing, BuyListing))

    def identity(self, *, computer_id: int) -> ShopIdentity:
        return ShopIdentity(
            computer_id=computer_id, name=self.info.name, multi_shop=self.info.multi_shop
        )

    def with_listings(self, listings: Iterable[Listing]) -> 'ShopSnapshot':
        return attrs.evolve(self, listings=tuple(listings))
