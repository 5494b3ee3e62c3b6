"""Shared constants for the ShopSync test suite"""

DEFAULT_SHOP_NAME = "6_4's Shop"
DEFAULT_COMPUTER_ID = 272
DEFAULT_CURRENCY = 'KST'
DIAMOND_ITEM_NAME = 'minecraft:diamond'
SHOPSYNC_CHANNEL = 9773
