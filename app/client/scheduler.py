"""
Планировщики периодических задач для клиента.

AsyncioScheduler работает на часах event loop, ManualScheduler - на
виртуальном времени, которое тесты двигают через advance().
"""
import asyncio
from typing import Callable, List, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Вызов callback каждые interval секунд до отмены"""

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class _RepeatingTimer:
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._cancelled = False
        self._arm()

    def _arm(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._arm()
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()


class AsyncioScheduler:
    """Таймер поверх asyncio event loop"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_every(self, interval: float, callback: Callable[[], None]) -> _RepeatingTimer:
        loop = self._loop or asyncio.get_running_loop()
        return _RepeatingTimer(loop, interval, callback)


class _ManualTimer:
    def __init__(self, scheduler: "ManualScheduler", interval: float, callback: Callable[[], None]):
        self.scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.next_fire = scheduler.now + interval
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Планировщик с виртуальным временем"""

    def __init__(self):
        self.now = 0.0
        self._timers: List[_ManualTimer] = []

    def call_every(self, interval: float, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(self, interval, callback)
        self._timers.append(timer)
        return timer

    @property
    def active_timers(self) -> int:
        return sum(1 for timer in self._timers if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        """Сдвиг времени вперед с вызовом всех наступивших срабатываний по порядку"""
        target = self.now + seconds
        while True:
            due = [t for t in self._timers if not t.cancelled and t.next_fire <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.next_fire)
            self.now = timer.next_fire
            timer.next_fire += timer.interval
            timer.callback()
        self.now = target
