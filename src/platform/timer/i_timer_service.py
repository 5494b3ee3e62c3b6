"""Timer Service Interface (Port)"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Protocol


TimerCallback = Callable[[], Awaitable[None]]


class TimerHandle(Protocol):
    deadline: float

    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class ITimerService(ABC):
    """Monotonic clock plus one-shot timers, supplied by the host environment"""

    @abstractmethod
    def now(self) -> float:
        """Monotonic time in seconds"""
        pass

    @abstractmethod
    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle:
        """
        Run callback once after delay seconds

        Note:
            - Cancelling the returned handle before it fires discards the callback
            - A callback that raises is logged, never propagated to the caller
        """
        pass
