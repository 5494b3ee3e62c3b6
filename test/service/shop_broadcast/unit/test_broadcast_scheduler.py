"""
Unit tests for BroadcastScheduler

Time is driven by ManualTimerService, so every scenario is expressed in
exact seconds. Broadcasts render through a real ShopStateHolder to check
that what goes out is the state current at render time.
"""

import random
from unittest.mock import Mock

import pytest

from src.service.shared_kernel.domain.entity.shop_snapshot import ShopInfo, ShopSnapshot
from src.service.shop_broadcast.app.broadcast_scheduler import BroadcastScheduler
from src.service.shop_broadcast.domain.enum.broadcast_state import BroadcastState
from src.service.shop_broadcast.driven_adapter.state.shop_state_holder import ShopStateHolder
from test.manual_timer_service import ManualTimerService


def _snapshot(name: str) -> ShopSnapshot:
    return ShopSnapshot(info=ShopInfo(name=name, computer_id=272))


def _fixed_rng(value: float) -> Mock:
    rng = Mock(spec=random.Random)
    rng.random.return_value = value
    return rng


class _Harness:
    """Scheduler wired to a state holder and a recording broadcast"""

    def __init__(self, *, rng_value: float = 0.0, legacy: bool = False) -> None:
        self.timers = ManualTimerService()
        self.holder = ShopStateHolder(snapshot=_snapshot('v0'), computer_id=272)
        self.sent: list[tuple[float, str]] = []
        self.fail_next = False
        self.scheduler = BroadcastScheduler(
            timer_service=self.timers,
            broadcast=self.broadcast,
            legacy_interval_broadcast=legacy,
            rng=_fixed_rng(rng_value),
        )
        self.holder.set_change_listener(self.scheduler.notify_change)

    async def broadcast(self) -> None:
        self.sent.append((self.timers.now(), self.holder.get_snapshot().info.name))
        if self.fail_next:
            self.fail_next = False
            raise ConnectionError('modem detached')

    async def change_at(self, when: float, name: str) -> None:
        await self.timers.advance_to(when)
        await self.holder.replace(_snapshot(name))

    @property
    def send_times(self) -> list[float]:
        return [when for when, _ in self.sent]


@pytest.mark.unit
class TestFirstBroadcast:
    def test_start_enters_pending_first_broadcast(self) -> None:
        harness = _Harness(rng_value=0.5)

        delay = harness.scheduler.start()

        assert delay == pytest.approx(22.5)
        assert harness.scheduler.state is BroadcastState.PENDING_FIRST_BROADCAST
        assert harness.timers.next_deadline() == pytest.approx(22.5)

    @pytest.mark.parametrize('seed', range(25))
    def test_first_delay_within_jitter_window(self, seed: int) -> None:
        scheduler = BroadcastScheduler(
            timer_service=ManualTimerService(),
            broadcast=Mock(),
            rng=random.Random(seed),
        )

        delay = scheduler.start()

        assert 15.0 <= delay < 30.0

    def test_upper_bound_is_exclusive(self) -> None:
        scheduler = BroadcastScheduler(
            timer_service=ManualTimerService(),
            broadcast=Mock(),
            rng=_fixed_rng(0.999999999),
        )

        assert scheduler.first_broadcast_delay() < 30.0

    @pytest.mark.asyncio
    async def test_first_broadcast_fires_at_delay(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()

        await harness.timers.advance_to(14.9)
        assert harness.sent == []

        await harness.timers.advance_to(15.0)
        assert harness.sent == [(15.0, 'v0')]
        assert harness.scheduler.state is BroadcastState.COOLDOWN_CLEAN
        assert harness.scheduler.last_broadcast_at == 15.0

    @pytest.mark.asyncio
    async def test_change_before_first_broadcast_does_not_send_early(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()

        await harness.change_at(3.0, 'v1')
        await harness.change_at(10.0, 'v2')
        assert harness.sent == []
        assert harness.scheduler.state is BroadcastState.PENDING_FIRST_BROADCAST

        await harness.timers.advance_to(15.0)
        assert harness.sent == [(15.0, 'v2')]
        assert harness.scheduler.state is BroadcastState.COOLDOWN_CLEAN

    def test_start_twice_raises(self) -> None:
        harness = _Harness()
        harness.scheduler.start()

        with pytest.raises(RuntimeError):
            harness.scheduler.start()

    def test_invalid_jitter_window(self) -> None:
        with pytest.raises(ValueError):
            BroadcastScheduler(
                timer_service=ManualTimerService(),
                broadcast=Mock(),
                first_delay_min=30.0,
                first_delay_max=15.0,
            )


@pytest.mark.unit
class TestDebounce:
    @pytest.mark.asyncio
    async def test_changes_inside_cooldown_coalesce(self) -> None:
        # Broadcast at t=0 (relative), changes at t=5 and t=12, one send at t=30
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()
        await harness.timers.advance_to(15.0)

        await harness.change_at(20.0, 'v1')
        assert harness.scheduler.state is BroadcastState.COOLDOWN_DIRTY
        await harness.change_at(27.0, 'v2')
        assert harness.scheduler.state is BroadcastState.COOLDOWN_DIRTY

        await harness.timers.advance_to(44.9)
        assert len(harness.sent) == 1

        await harness.timers.advance_to(45.0)
        assert harness.sent == [(15.0, 'v0'), (45.0, 'v2')]
        assert harness.scheduler.state is BroadcastState.COOLDOWN_CLEAN

    @pytest.mark.asyncio
    async def test_broadcast_renders_state_current_at_timer(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()
        await harness.timers.advance_to(15.0)

        await harness.change_at(20.0, 'v1')
        await harness.change_at(44.0, 'v2')
        await harness.timers.advance_to(45.0)

        assert harness.sent[-1] == (45.0, 'v2')

    @pytest.mark.asyncio
    async def test_cooldown_deadline_not_extended_by_changes(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()
        await harness.timers.advance_to(15.0)

        for when in (16.0, 25.0, 40.0, 44.5):
            await harness.change_at(when, f'v{when}')

        assert harness.timers.next_deadline() == 45.0

    @pytest.mark.asyncio
    async def test_clean_cooldown_goes_idle_without_broadcast(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()

        await harness.timers.advance_to(45.0)

        assert harness.send_times == [15.0]
        assert harness.scheduler.state is BroadcastState.IDLE
        assert harness.timers.next_deadline() is None

    @pytest.mark.asyncio
    async def test_change_while_idle_broadcasts_immediately(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()
        await harness.timers.advance_to(100.0)
        assert harness.scheduler.state is BroadcastState.IDLE

        await harness.change_at(100.0, 'v1')

        assert harness.sent[-1] == (100.0, 'v1')
        assert harness.scheduler.state is BroadcastState.COOLDOWN_CLEAN
        assert harness.timers.next_deadline() == 130.0

    @pytest.mark.asyncio
    async def test_idle_send_then_coalesced_followup(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()
        await harness.timers.advance_to(50.0)

        await harness.change_at(50.0, 'v1')
        await harness.change_at(55.0, 'v2')
        await harness.change_at(62.0, 'v3')
        await harness.timers.advance_to(200.0)

        assert harness.sent == [(15.0, 'v0'), (50.0, 'v1'), (80.0, 'v3')]
        assert harness.scheduler.state is BroadcastState.IDLE

    @pytest.mark.asyncio
    async def test_identical_replace_is_not_a_change(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()
        await harness.timers.advance_to(15.0)

        await harness.change_at(20.0, 'v0')

        assert harness.scheduler.state is BroadcastState.COOLDOWN_CLEAN

    @pytest.mark.asyncio
    async def test_minimum_interval_between_broadcasts(self) -> None:
        harness = _Harness(rng_value=0.3)
        harness.scheduler.start()
        rng = random.Random(7)

        now = 0.0
        for revision in range(300):
            now += rng.uniform(0.1, 12.0)
            await harness.change_at(now, f'v{revision}')
        await harness.timers.advance_to(now + 60.0)

        times = harness.send_times
        assert len(times) > 10
        assert all(later - earlier >= 30.0 for earlier, later in zip(times, times[1:]))
        # Final state always reaches the air
        assert harness.sent[-1][1] == 'v299'


@pytest.mark.unit
class TestLegacyMode:
    @pytest.mark.asyncio
    async def test_broadcasts_every_cooldown_regardless_of_changes(self) -> None:
        harness = _Harness(rng_value=0.0, legacy=True)
        harness.scheduler.start()

        await harness.timers.advance_to(105.0)

        assert harness.send_times == [15.0, 45.0, 75.0, 105.0]

    @pytest.mark.asyncio
    async def test_changes_do_not_affect_timing(self) -> None:
        harness = _Harness(rng_value=0.0, legacy=True)
        harness.scheduler.start()
        await harness.timers.advance_to(15.0)

        await harness.change_at(16.0, 'v1')
        assert harness.send_times == [15.0]

        await harness.timers.advance_to(45.0)
        assert harness.sent[-1] == (45.0, 'v1')


@pytest.mark.unit
class TestFailureAndShutdown:
    @pytest.mark.asyncio
    async def test_failed_broadcast_still_starts_cooldown(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.fail_next = True
        harness.scheduler.start()

        await harness.timers.advance_to(15.0)

        assert harness.send_times == [15.0]
        assert harness.scheduler.broadcast_count == 1
        assert harness.scheduler.state is BroadcastState.COOLDOWN_CLEAN

        await harness.change_at(20.0, 'v1')
        await harness.timers.advance_to(45.0)
        assert harness.sent[-1] == (45.0, 'v1')

    @pytest.mark.asyncio
    async def test_stop_cancels_pending_timer(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()

        harness.scheduler.stop()
        await harness.timers.advance_to(100.0)

        assert harness.sent == []
        assert harness.scheduler.running is False
        assert harness.timers.pending == []

    @pytest.mark.asyncio
    async def test_stop_during_cooldown_drops_dirty_change(self) -> None:
        harness = _Harness(rng_value=0.0)
        harness.scheduler.start()
        await harness.timers.advance_to(15.0)
        await harness.change_at(20.0, 'v1')

        harness.scheduler.stop()
        await harness.timers.advance_to(100.0)

        assert harness.send_times == [15.0]

    @pytest.mark.asyncio
    async def test_change_before_start_is_ignored(self) -> None:
        harness = _Harness(rng_value=0.0)

        await harness.holder.replace(_snapshot('v1'))

        assert harness.sent == []
        assert harness.scheduler.state is BroadcastState.IDLE
