"""
ShopSync wire schema (standard v1.2)

Shape-only validation of the untyped broadcast table. Every optional key is
declared ``Optional[...] = None`` so an absent key and an explicit null are
the same thing to the decoder. Domain rules (stock vs madeOnDemand, free
prices, ...) live on the entities, not here.
"""

from typing import Annotated, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from src.service.shared_kernel.domain.enum.dimension import Dimension


class _WireModel(BaseModel):
    # Unknown keys come from newer revisions; ignore them
    model_config = ConfigDict(extra='ignore', frozen=True)


class SoftwareSchema(_WireModel):
    name: Optional[StrictStr] = None
    version: Optional[StrictStr] = None


class LocationSchema(_WireModel):
    coordinates: Optional[Annotated[List[StrictInt], Field(min_length=3, max_length=3)]] = None
    description: Optional[StrictStr] = None
    dimension: Optional[Dimension] = None


class InfoSchema(_WireModel):
    """info table minus ``name``, which the decoder checks before anything else"""

    description: Optional[StrictStr] = None
    owner: Optional[StrictStr] = None
    computerID: Optional[StrictInt] = None
    multiShop: Optional[StrictInt] = None
    software: Optional[SoftwareSchema] = None
    location: Optional[LocationSchema] = None
    otherLocations: Optional[List[LocationSchema]] = None

    model_config = ConfigDict(
        extra='ignore',
        frozen=True,
        json_schema_extra={
            'example': {
                'description': 'Shop focused on selling common materials and items.',
                'owner': '6_4',
                'computerID': 272,
                'software': {'name': 'swshop', 'version': '3150525'},
                'location': {
                    'coordinates': [138, 75, 248],
                    'description': 'North of spawn, just outside Immediate Spawn Area.',
                    'dimension': 'overworld',
                },
            }
        },
    )


class PriceSchema(_WireModel):
    value: Union[StrictInt, StrictFloat]
    currency: Optional[StrictStr] = None
    address: Optional[StrictStr] = None
    requiredMeta: Optional[StrictStr] = None


class ItemSchema(_WireModel):
    name: Annotated[StrictStr, Field(min_length=1)]
    displayName: StrictStr
    nbt: Optional[StrictStr] = None


class ListingSchema(_WireModel):
    prices: List[PriceSchema]
    item: ItemSchema
    shopBuysItem: Optional[StrictBool] = None
    dynamicPrice: Optional[StrictBool] = None
    stock: Optional[StrictInt] = None
    madeOnDemand: Optional[StrictBool] = None
    requiresInteraction: Optional[StrictBool] = None
    noLimit: Optional[StrictBool] = None

    model_config = ConfigDict(
        extra='ignore',
        frozen=True,
        json_schema_extra={
            'example': {
                'prices': [
                    {'value': 100, 'currency': 'KST', 'address': 'dia@64.kst'},
                ],
                'item': {'name': 'minecraft:diamond', 'displayName': 'Diamond'},
                'stock': 100,
            }
        },
    )
