"""
Test Configuration and Fixtures

This module provides:
- Environment setup that must precede application imports (settings, logging)
- Shared ShopSync documents and snapshots used across test packages

Architecture:
- Unit tests (test/**/unit/): pure, no infrastructure; collaborators are mocks
- Integration tests (test/**/integration/): real anyio task groups and transports
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks are built at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['TRANSPORT_BACKEND'] = 'memory'
    os.environ['SHOP_DEFINITION_POLL_SECONDS'] = '0'
    os.environ.pop('SHOP_COMPUTER_ID', None)


_early_setup_test_environment()

from typing import Any  # noqa: E402

import pytest  # noqa: E402

from src.service.shared_kernel.app.codec.document_decoder import ShopSyncDecoder  # noqa: E402
from src.service.shared_kernel.domain.entity.listing import (  # noqa: E402
    BuyListing,
    SellListing,
)
from src.service.shared_kernel.domain.entity.shop_snapshot import (  # noqa: E402
    ShopInfo,
    ShopSnapshot,
)
from src.service.shared_kernel.domain.enum.dimension import Dimension  # noqa: E402
from src.service.shared_kernel.domain.value_object.item_ref import ItemRef  # noqa: E402
from src.service.shared_kernel.domain.value_object.location import (  # noqa: E402
    Location,
    Software,
)
from src.service.shared_kernel.domain.value_object.price_entry import PriceEntry  # noqa: E402
from test.shop_sync_documents import make_listing_document  # noqa: E402
from test.test_constants import (  # noqa: E402
    DEFAULT_COMPUTER_ID,
    DEFAULT_CURRENCY,
    DEFAULT_SHOP_NAME,
    DIAMOND_ITEM_NAME,
)


@pytest.fixture
def decoder() -> ShopSyncDecoder:
    return ShopSyncDecoder()


@pytest.fixture
def shop_sync_document() -> dict[str, Any]:
    return {
        'type': 'ShopSync',
        'info': {
            'name': DEFAULT_SHOP_NAME,
            'description': 'Shop focused on selling common materials and items.',
            'owner': '6_4',
            'computerID': DEFAULT_COMPUTER_ID,
            'software': {'name': 'swshop', 'version': '3150525'},
            'location': {
                'coordinates': [138, 75, 248],
                'description': 'North of spawn',
                'dimension': 'overworld',
            },
        },
        'items': [
            make_listing_document(),
            {
                'prices': [{'value': 0.25, 'currency': DEFAULT_CURRENCY}],
                'item': {'name': 'minecraft:cobblestone', 'displayName': 'Cobblestone'},
                'dynamicPrice': True,
                'madeOnDemand': True,
            },
            {
                'shopBuysItem': True,
                'prices': [{'value': 1, 'currency': DEFAULT_CURRENCY}],
                'item': {'name': 'minecraft:iron_ingot', 'displayName': 'Iron Ingot'},
                'stock': 128,
            },
        ],
    }


@pytest.fixture
def shop_snapshot() -> ShopSnapshot:
    return ShopSnapshot(
        info=ShopInfo(
            name=DEFAULT_SHOP_NAME,
            description='Shop focused on selling common materials and items.',
            owner='6_4',
            computer_id=DEFAULT_COMPUTER_ID,
            software=Software(name='swshop', version='3150525'),
            location=Location(
                coordinates=(138, 75, 248),
                description='North of spawn',
                dimension=Dimension.OVERWORLD,
            ),
            other_locations=[
                Location(description='Nether hub stall', dimension=Dimension.NETHER),
            ],
        ),
        listings=[
            SellListing.create(
                item=ItemRef(name=DIAMOND_ITEM_NAME, display_name='Diamond'),
                prices=[
                    PriceEntry.create(
                        value=5,
                        currency=DEFAULT_CURRENCY,
                        address='shop@sc.kst',
                        required_meta='diamond',
                    )
                ],
                stock=64,
            ),
            SellListing.create(
                item=ItemRef(
                    name='minecraft:enchanted_book',
                    display_name='Mending Book',
                    nbt='a1b2c3d4',
                ),
                prices=[PriceEntry.create(value=0.5, currency='TST')],
                dynamic_price=True,
                made_on_demand=True,
                requires_interaction=True,
            ),
            BuyListing.create(
                item=ItemRef(name='minecraft:iron_ingot', display_name='Iron Ingot'),
                prices=[PriceEntry.create(value=1, currency=DEFAULT_CURRENCY)],
                no_limit=True,
            ),
        ],
    )
