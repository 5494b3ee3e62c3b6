"""
Snapshot Encoder

Renders a ShopSnapshot into the ShopSync wire table. Pure and deterministic:
the same snapshot always yields the same document with the same key order.

Omission rules:
- optional fields holding None are left out, never given a placeholder
- boolean flags are written only when true (absent means false)
- an empty otherLocations list is left out
"""

from typing import Any, Optional

from src.service.shared_kernel.domain.entity.listing import BuyListing, Listing, SellListing
from src.service.shared_kernel.domain.entity.shop_snapshot import ShopInfo, ShopSnapshot
from src.service.shared_kernel.domain.shop_sync_protocol import PROTOCOL_TYPE
from src.service.shared_kernel.domain.value_object.item_ref import ItemRef
from src.service.shared_kernel.domain.value_object.location import Location, Software
from src.service.shared_kernel.domain.value_object.price_entry import PriceEntry


Document = dict[str, Any]


def _put(target: dict[str, Any], key: str, value: Optional[Any]) -> None:
    if value is not None:
        target[key] = value


def _flag(target: dict[str, Any], key: str, value: bool) -> None:
    if value:
        target[key] = True


class SnapshotEncoder:
    @staticmethod
    def render(snapshot: ShopSnapshot) -> Document:
        return {
            'type': PROTOCOL_TYPE,
            'info': SnapshotEncoder._render_info(snapshot.info),
            'items': [SnapshotEncoder._render_listing(listing) for listing in snapshot.listings],
        }

    @staticmethod
    def _render_info(info: ShopInfo) -> dict[str, Any]:
        rendered: dict[str, Any] = {'name': info.name}
        _put(rendered, 'description', info.description)
        _put(rendered, 'owner', info.owner)
        _put(rendered, 'computerID', info.computer_id)
        _put(rendered, 'multiShop', info.multi_shop)
        if info.software is not None:
            rendered['software'] = SnapshotEncoder._render_software(info.software)
        if info.location is not None:
            rendered['location'] = SnapshotEncoder._render_location(info.location)
        if info.other_locations:
            rendered['otherLocations'] = [
                SnapshotEncoder._render_location(location) for location in info.other_locations
            ]
        return rendered

    @staticmethod
    def _render_software(software: Software) -> dict[str, Any]:
        rendered: dict[str, Any] = {}
        _put(rendered, 'name', software.name)
        _put(rendered, 'version', software.version)
        return rendered

    @staticmethod
    def _render_location(location: Location) -> dict[str, Any]:
        rendered: dict[str, Any] = {}
        if location.coordinates is not None:
            rendered['coordinates'] = list(location.coordinates)
        _put(rendered, 'description', location.description)
        if location.dimension is not None:
            rendered['dimension'] = str(location.dimension)
        return rendered

    @staticmethod
    def _render_listing(listing: Listing) -> dict[str, Any]:
        rendered: dict[str, Any] = {}
        if isinstance(listing, BuyListing):
            rendered['shopBuysItem'] = True
        rendered['prices'] = [SnapshotEncoder._render_price(price) for price in listing.prices]
        rendered['item'] = SnapshotEncoder._render_item(listing.item)
        _flag(rendered, 'dynamicPrice', listing.dynamic_price)
        _put(rendered, 'stock', listing.stock)

        match listing:
            case SellListing():
                _flag(rendered, 'madeOnDemand', listing.made_on_demand)
                _flag(rendered, 'requiresInteraction', listing.requires_interaction)
            case BuyListing():
                _flag(rendered, 'noLimit', listing.no_limit)
        return rendered

    @staticmethod
    def _render_price(price: PriceEntry) -> dict[str, Any]:
        rendered: dict[str, Any] = {'value': price.value}
        _put(rendered, 'currency', price.currency)
        _put(rendered, 'address', price.address)
        _put(rendered, 'requiredMeta', price.required_meta)
        return rendered

    @staticmethod
    def _render_item(item: ItemRef) -> dict[str, Any]:
        rendered: dict[str, Any] = {'name': item.name}
        _put(rendered, 'nbt', item.nbt)
        rendered['displayName'] = item.display_name
        return rendered
