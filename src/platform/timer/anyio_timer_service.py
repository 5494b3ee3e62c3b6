"""
anyio Timer Service

One task per timer inside a caller-owned task group. Each timer sleeps in
its own CancelScope so cancelling the handle discards it without touching
the other timers.
"""

import anyio
from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.platform.timer.i_timer_service import ITimerService, TimerCallback


class AnyioTimerHandle:
    def __init__(self, *, deadline: float) -> None:
        self.deadline = deadline
        self._scope = anyio.CancelScope()
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        self._scope.cancel()


class AnyioTimerService(ITimerService):
    def __init__(self, *, task_group: TaskGroup) -> None:
        self._task_group = task_group

    def now(self) -> float:
        return anyio.current_time()

    def call_later(self, delay: float, callback: TimerCallback) -> AnyioTimerHandle:
        handle = AnyioTimerHandle(deadline=self.now() + delay)
        self._task_group.start_soon(self._run, handle, delay, callback)
        return handle

    async def _run(self, handle: AnyioTimerHandle, delay: float, callback: TimerCallback) -> None:
        with handle._scope:
            await anyio.sleep(delay)
        if handle.cancelled:
            return

        try:
            await callback()
        except Exception as e:
            Logger.base.exception(f'❌ [TIMER] Callback failed: {e}')
