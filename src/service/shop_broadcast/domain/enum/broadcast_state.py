from enum import StrEnum


class BroadcastState(StrEnum):
    IDLE = 'idle'  # Nothing pending, next change is sent at once
    PENDING_FIRST_BROADCAST = 'pending_first_broadcast'
    COOLDOWN_CLEAN = 'cooldown_clean'  # Recently sent, no change since
    COOLDOWN_DIRTY = 'cooldown_dirty'  # Recently sent, change waiting for the timer
