import anyio
from anyio import fail_after
import pytest

from src.platform.timer.anyio_timer_service import AnyioTimerService


class TestAnyioTimerService:
    @pytest.mark.asyncio
    async def test_callback_fires_after_delay(self) -> None:
        fired = anyio.Event()

        async def callback() -> None:
            fired.set()

        async with anyio.create_task_group() as tg:
            timers = AnyioTimerService(task_group=tg)
            started = timers.now()
            handle = timers.call_later(0.05, callback)

            with fail_after(1.0):
                await fired.wait()

        assert timers.now() - started >= 0.05
        assert handle.deadline == pytest.approx(started + 0.05, abs=0.01)
        assert handle.cancelled is False

    @pytest.mark.asyncio
    async def test_cancelled_timer_never_fires(self) -> None:
        calls: list[str] = []

        async def callback() -> None:
            calls.append('fired')

        async with anyio.create_task_group() as tg:
            timers = AnyioTimerService(task_group=tg)
            handle = timers.call_later(0.05, callback)
            handle.cancel()
            await anyio.sleep(0.1)

        assert calls == []
        assert handle.cancelled is True

    @pytest.mark.asyncio
    async def test_timers_fire_in_deadline_order(self) -> None:
        calls: list[str] = []

        def record(label: str):
            async def callback() -> None:
                calls.append(label)

            return callback

        async with anyio.create_task_group() as tg:
            timers = AnyioTimerService(task_group=tg)
            timers.call_later(0.06, record('late'))
            timers.call_later(0.02, record('early'))

        assert calls == ['early', 'late']

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_break_the_task_group(self) -> None:
        calls: list[str] = []

        async def failing() -> None:
            raise RuntimeError('boom')

        async def healthy() -> None:
            calls.append('healthy')

        async with anyio.create_task_group() as tg:
            timers = AnyioTimerService(task_group=tg)
            timers.call_later(0.01, failing)
            timers.call_later(0.03, healthy)

        assert calls == ['healthy']
