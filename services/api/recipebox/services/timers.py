"""Step countdown timers.

Each user has a single active countdown. Starting a new one cancels the
running tick task first, so there is never more than one ticker
decrementing the shared value.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from ..realtime.timer_bus import publish_timer_event
from ..settings import settings

logger = logging.getLogger("recipebox.timers")

Callback = Callable[[int], Union[None, Awaitable[None]]]


async def _call(cb: Optional[Callback], remaining: int) -> None:
    if cb is None:
        return
    result = cb(remaining)
    if inspect.isawaitable(result):
        await result


class CountdownTimer:
    def __init__(
        self,
        on_tick: Optional[Callback] = None,
        on_done: Optional[Callback] = None,
        tick_seconds: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.on_tick = on_tick
        self.on_done = on_done
        self.tick_seconds = settings.timer_tick_seconds if tick_seconds is None else tick_seconds
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self._generation = 0
        self.remaining: Optional[int] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, seconds: int) -> None:
        """Begin counting down from seconds, replacing any running countdown.

        Must be called from a running event loop.
        """
        self.cancel()
        self._generation += 1
        self.remaining = max(int(seconds), 0)
        self._task = asyncio.get_running_loop().create_task(self._run(self._generation))

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, generation: int) -> None:
        while self.remaining and self.remaining > 0:
            await self._sleep(self.tick_seconds)
            if generation != self._generation:
                return
            self.remaining -= 1
            await _call(self.on_tick, self.remaining)

        if generation == self._generation:
            await _call(self.on_done, 0)


class TimerRegistry:
    """One countdown per user email; ticks and completion go to the timer bus."""

    def __init__(self):
        self._timers: dict[str, CountdownTimer] = {}

    def get(self, email: str) -> Optional[CountdownTimer]:
        return self._timers.get(email)

    def start(self, email: str, seconds: int) -> CountdownTimer:
        timer = self._timers.get(email)
        if timer is None:
            timer = CountdownTimer(
                on_tick=lambda remaining: _publish(email, "tick", remaining),
                on_done=lambda remaining: _publish(email, "done", remaining),
            )
            self._timers[email] = timer
        elif timer.active:
            logger.info(f"Replacing active timer for {email} ({timer.remaining}s left)")
        timer.start(seconds)
        logger.info(f"Started {seconds}s timer for {email}")
        return timer

    def discard(self, email: str) -> None:
        timer = self._timers.pop(email, None)
        if timer is not None:
            timer.cancel()

    def shutdown(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()


async def _publish(email: str, event_type: str, remaining: int) -> None:
    if event_type == "done":
        logger.info(f"Time's up for {email}")
    try:
        await publish_timer_event(email, event_type, remaining)
    except Exception as e:
        logger.error(f"Failed to publish timer {event_type} for {email}: {e}")


registry = TimerRegistry()
