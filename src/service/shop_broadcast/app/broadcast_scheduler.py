"""
Broadcast Scheduler

Debounces shop state changes into ShopSync broadcasts.

Throttle Pattern:
- start() arms the first timer with a random delay in [15, 30) s
- every broadcast opens a 30 s cooldown; changes inside it only mark the
  shop dirty, and the timer sends one fresh snapshot when it expires
- a cooldown that expires clean parks the scheduler in IDLE, where the next
  change is sent immediately
- legacy mode ignores changes and broadcasts every 30 s

State machine:
    PENDING_FIRST_BROADCAST --timer--> COOLDOWN_CLEAN
    COOLDOWN_CLEAN --change--> COOLDOWN_DIRTY --timer--> COOLDOWN_CLEAN
    COOLDOWN_CLEAN --timer--> IDLE --change--> COOLDOWN_CLEAN
"""

import random
from typing import Awaitable, Callable, Optional

from src.platform.logging.loguru_io import Logger
from src.platform.timer.i_timer_service import ITimerService, TimerHandle
from src.service.shared_kernel.domain.shop_sync_protocol import (
    BROADCAST_COOLDOWN_SECONDS,
    FIRST_BROADCAST_MAX_DELAY,
    FIRST_BROADCAST_MIN_DELAY,
)
from src.service.shop_broadcast.domain.enum.broadcast_state import BroadcastState


BroadcastAction = Callable[[], Awaitable[object]]


class BroadcastScheduler:
    def __init__(
        self,
        *,
        timer_service: ITimerService,
        broadcast: BroadcastAction,
        cooldown: float = BROADCAST_COOLDOWN_SECONDS,
        first_delay_min: float = FIRST_BROADCAST_MIN_DELAY,
        first_delay_max: float = FIRST_BROADCAST_MAX_DELAY,
        legacy_interval_broadcast: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Args:
            timer_service: Monotonic clock and one-shot timers
            broadcast: Renders the current state and transmits it
            cooldown: Minimum spacing between two broadcasts
            first_delay_min: Lower bound (inclusive) of the first broadcast delay
            first_delay_max: Upper bound (exclusive) of the first broadcast delay
            legacy_interval_broadcast: Broadcast every cooldown regardless of changes
            rng: Source of the first-delay jitter
        """
        if first_delay_max < first_delay_min:
            raise ValueError('first_delay_max must not be below first_delay_min')

        self._timer_service = timer_service
        self._broadcast = broadcast
        self._cooldown = cooldown
        self._first_delay_min = first_delay_min
        self._first_delay_max = first_delay_max
        self._legacy = legacy_interval_broadcast
        self._rng = rng or random.Random()

        self._state = BroadcastState.IDLE
        self._timer: Optional[TimerHandle] = None
        self._running = False
        self._last_broadcast_at: Optional[float] = None
        self._broadcast_count = 0

    @property
    def state(self) -> BroadcastState:
        return self._state

    @property
    def running(self) -> bool:
        return self._running

    @property
    def last_broadcast_at(self) -> Optional[float]:
        return self._last_broadcast_at

    @property
    def broadcast_count(self) -> int:
        return self._broadcast_count

    def first_broadcast_delay(self) -> float:
        # random() is in [0, 1), which keeps the upper bound exclusive
        span = self._first_delay_max - self._first_delay_min
        return self._first_delay_min + self._rng.random() * span

    def start(self) -> float:
        """
        Arm the first broadcast

        Returns:
            Delay in seconds until the first broadcast
        """
        if self._running:
            raise RuntimeError('BroadcastScheduler already started')

        delay = self.first_broadcast_delay()
        self._running = True
        self._state = BroadcastState.PENDING_FIRST_BROADCAST
        self._arm(delay)
        Logger.base.info(
            f'⏱️ [SCHEDULER] Started (first broadcast in {delay:.1f}s, legacy={self._legacy})'
        )
        return delay

    def stop(self) -> None:
        """Cancel the pending timer; no further broadcasts"""
        self._cancel_timer()
        self._running = False
        self._state = BroadcastState.IDLE
        Logger.base.info(f'🛑 [SCHEDULER] Stopped after {self._broadcast_count} broadcasts')

    async def notify_change(self) -> None:
        """Report that the shop state changed; called on every mutation"""
        if not self._running or self._legacy:
            return

        match self._state:
            case BroadcastState.IDLE:
                await self._broadcast_now()
            case BroadcastState.COOLDOWN_CLEAN:
                self._state = BroadcastState.COOLDOWN_DIRTY
                Logger.base.debug('⏱️ [SCHEDULER] Change queued until cooldown ends')
            case BroadcastState.COOLDOWN_DIRTY | BroadcastState.PENDING_FIRST_BROADCAST:
                pass

    async def _on_timer(self) -> None:
        self._timer = None
        if not self._running:
            return

        match self._state:
            case BroadcastState.PENDING_FIRST_BROADCAST | BroadcastState.COOLDOWN_DIRTY:
                await self._broadcast_now()
            case BroadcastState.COOLDOWN_CLEAN if self._legacy:
                await self._broadcast_now()
            case BroadcastState.COOLDOWN_CLEAN:
                self._state = BroadcastState.IDLE
                Logger.base.debug('⏱️ [SCHEDULER] Cooldown ended clean, idle')
            case BroadcastState.IDLE:
                pass

    async def _broadcast_now(self) -> None:
        # Enter the cooldown before rendering: changes made while the
        # transmit is in flight must mark the shop dirty
        self._state = BroadcastState.COOLDOWN_CLEAN
        self._last_broadcast_at = self._timer_service.now()
        self._broadcast_count += 1
        self._arm(self._cooldown)

        try:
            await self._broadcast()
        except Exception as e:
            Logger.base.error(f'❌ [SCHEDULER] Broadcast failed, next attempt after cooldown: {e}')

    def _arm(self, delay: float) -> None:
        self._cancel_timer()
        self._timer = self._timer_service.call_later(delay, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
