"""ShopSync wire constants (standard v1.2)"""

PROTOCOL_TYPE = 'ShopSync'
SHOPSYNC_CHANNEL = 9773
REPLY_CHANNEL_MODULUS = 65536

BROADCAST_COOLDOWN_SECONDS = 30.0
FIRST_BROADCAST_MIN_DELAY = 15.0
FIRST_BROADCAST_MAX_DELAY = 30.0


def reply_channel_for(computer_id: int, *, modulus: int = REPLY_CHANNEL_MODULUS) -> int:
    """Modem reply channel a shop transmits with: its computer ID modulo 65536"""
    return computer_id % modulus
