from enum import StrEnum


class IdentitySource(StrEnum):
    """Where a receiver got the shop's computer ID from"""

    COMPUTER_ID = 'computer_id'  # info.computerID
    REPLY_CHANNEL = 'reply_channel'  # Legacy fallback: transport reply address mod 65536
