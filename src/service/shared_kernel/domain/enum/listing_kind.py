from enum import StrEnum


class ListingKind(StrEnum):
    """Which way items move; the wire carries this as the shopBuysItem flag"""

    SELL = 'sell'  # Shop gives items for currency
    BUY = 'buy'  # Reverse shop ("sellshop"): shop takes items, pays currency
