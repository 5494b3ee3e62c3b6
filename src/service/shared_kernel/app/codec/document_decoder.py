"""
ShopSync Document Decoder

Turns an untyped inbound table into a fully defaulted ShopSnapshot.

Order of checks:
1. root ``type`` must be "ShopSync"              -> WrongTypeError
2. ``info.name`` must be a non-empty string      -> MissingRequiredFieldError
3. identity: info.computerID, else reply address mod 65536
4. each entry of ``items`` is validated on its own; a bad entry is dropped
   and reported as a MalformedListing warning, the rest of the shop survives

Older revisions that lack later optional fields decode with defaults. A
malformed optional info field is dropped with a MalformedField warning.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import ValidationError

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.codec.shop_sync_schema import (
    InfoSchema,
    ListingSchema,
    LocationSchema,
)
from src.service.shared_kernel.app.dto.decode_result import DecodeResult, DecodeWarning
from src.service.shared_kernel.domain.entity.listing import BuyListing, Listing, SellListing
from src.service.shared_kernel.domain.entity.shop_snapshot import ShopInfo, ShopSnapshot
from src.service.shared_kernel.domain.enum.error_kind import ErrorKind
from src.service.shared_kernel.domain.enum.identity_source import IdentitySource
from src.service.shared_kernel.domain.shop_sync_errors import (
    MalformedListingError,
    MissingRequiredFieldError,
    WrongTypeError,
)
from src.service.shared_kernel.domain.shop_sync_protocol import (
    PROTOCOL_TYPE,
    REPLY_CHANNEL_MODULUS,
)
from src.service.shared_kernel.domain.value_object.item_ref import ItemRef
from src.service.shared_kernel.domain.value_object.location import Location, Software
from src.service.shared_kernel.domain.value_object.price_entry import PriceEntry


def _describe(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        loc = '.'.join(str(part) for part in detail['loc'])
        parts.append(f'{loc}: {detail["msg"]}' if loc else detail['msg'])
    return '; '.join(parts)


def _to_location(schema: LocationSchema) -> Location:
    return Location(
        coordinates=tuple(schema.coordinates) if schema.coordinates is not None else None,
        description=schema.description,
        dimension=schema.dimension,
    )


class ShopSyncDecoder:
    def __init__(self, *, reply_channel_modulus: int = REPLY_CHANNEL_MODULUS) -> None:
        self._reply_channel_modulus = reply_channel_modulus

    def decode(self, document: Any, *, reply_address: int) -> DecodeResult:
        """
        Decode one inbound document

        Args:
            document: Raw table as delivered by the transport
            reply_address: Transport reply channel of the sender

        Returns:
            DecodeResult with the snapshot, resolved identity and warnings

        Raises:
            WrongTypeError: root is not a ShopSync table
            MissingRequiredFieldError: info.name absent, empty or not a string
        """
        if not isinstance(document, Mapping):
            raise WrongTypeError('document is not a table')
        doc_type = document.get('type')
        if doc_type != PROTOCOL_TYPE:
            raise WrongTypeError(f'unexpected document type {doc_type!r}', field_path='type')

        info_raw = document.get('info')
        if not isinstance(info_raw, Mapping):
            raise MissingRequiredFieldError('info')
        name = info_raw.get('name')
        if not isinstance(name, str) or not name:
            raise MissingRequiredFieldError('info.name')

        warnings: list[DecodeWarning] = []
        info_schema = self._validate_info(info_raw, warnings)

        computer_id, identity_source = resolve_computer_id(
            info_schema.computerID,
            reply_address=reply_address,
            modulus=self._reply_channel_modulus,
        )

        info = ShopInfo(
            name=name,
            description=info_schema.description,
            owner=info_schema.owner,
            computer_id=info_schema.computerID,
            multi_shop=info_schema.multiShop,
            software=(
                Software(name=info_schema.software.name, version=info_schema.software.version)
                if info_schema.software is not None
                else None
            ),
            location=(
                _to_location(info_schema.location) if info_schema.location is not None else None
            ),
            other_locations=tuple(
                _to_location(location) for location in info_schema.otherLocations or ()
            ),
        )

        listings = self._decode_listings(document.get('items'), warnings)
        snapshot = ShopSnapshot(info=info, listings=listings)
        identity = snapshot.identity(computer_id=computer_id)

        if warnings:
            Logger.base.debug(
                f'🧾 [DECODER] {identity} accepted with {len(warnings)} warning(s): '
                + ', '.join(str(w) for w in warnings)
            )
        return DecodeResult(
            snapshot=snapshot,
            identity=identity,
            identity_source=identity_source,
            warnings=warnings,
        )

    def _validate_info(
        self, info_raw: Mapping[Any, Any], warnings: list[DecodeWarning]
    ) -> InfoSchema:
        data = {key: value for key, value in info_raw.items() if key != 'name'}
        while True:
            try:
                return InfoSchema.model_validate(data)
            except ValidationError as e:
                reasons: dict[Any, str] = {}
                for detail in e.errors():
                    field = detail['loc'][0] if detail['loc'] else None
                    if field in data and field not in reasons:
                        reasons[field] = detail['msg']
                if not reasons:
                    warnings.append(
                        DecodeWarning(
                            kind=ErrorKind.MALFORMED_FIELD, field_path='info', reason=_describe(e)
                        )
                    )
                    return InfoSchema()
                for field, reason in reasons.items():
                    warnings.append(
                        DecodeWarning(
                            kind=ErrorKind.MALFORMED_FIELD,
                            field_path=f'info.{field}',
                            reason=reason,
                        )
                    )
                    del data[field]

    def _decode_listings(
        self, items_raw: Any, warnings: list[DecodeWarning]
    ) -> list[Listing]:
        if items_raw is None:
            return []
        if not isinstance(items_raw, list | tuple):
            warnings.append(
                DecodeWarning(
                    kind=ErrorKind.MALFORMED_FIELD, field_path='items', reason='items is not a list'
                )
            )
            return []

        listings: list[Listing] = []
        for index, entry in enumerate(items_raw):
            try:
                listings.append(self._decode_listing(entry))
            except ValidationError as e:
                warnings.append(
                    DecodeWarning(
                        kind=ErrorKind.MALFORMED_LISTING, index=index, reason=_describe(e)
                    )
                )
            except MalformedListingError as e:
                warnings.append(
                    DecodeWarning(kind=ErrorKind.MALFORMED_LISTING, index=index, reason=e.message)
                )
        return listings

    def _decode_listing(self, entry: Any) -> Listing:
        if not isinstance(entry, Mapping):
            raise MalformedListingError('listing is not a table')

        schema = ListingSchema.model_validate(entry)
        item = ItemRef(
            name=schema.item.name, display_name=schema.item.displayName, nbt=schema.item.nbt
        )
        prices = [
            PriceEntry.create(
                value=price.value,
                currency=price.currency,
                address=price.address,
                required_meta=price.requiredMeta,
            )
            for price in schema.prices
        ]

        if schema.shopBuysItem:
            return BuyListing.create(
                item=item,
                prices=prices,
                stock=schema.stock,
                dynamic_price=bool(schema.dynamicPrice),
                no_limit=bool(schema.noLimit),
            )
        return SellListing.create(
            item=item,
            prices=prices,
            stock=schema.stock,
            dynamic_price=bool(schema.dynamicPrice),
            made_on_demand=bool(schema.madeOnDemand),
            requires_interaction=bool(schema.requiresInteraction),
        )


def resolve_computer_id(
    computer_id: Optional[int], *, reply_address: int, modulus: int = REPLY_CHANNEL_MODULUS
) -> tuple[int, IdentitySource]:
    """Standalone identity rule, for callers that only hold the raw fields"""
    if computer_id is not None and not isinstance(computer_id, bool):
        return computer_id, IdentitySource.COMPUTER_ID
    return reply_address % modulus, IdentitySource.REPLY_CHANNEL
