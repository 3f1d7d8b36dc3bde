# director/time/tween.py
"""
Tween / Timeline - cancelable interpolations for scene direction.

A Tween interpolates a float or vector from a start value to an end value
over a duration, calling `on_update` every frame. The start value is
captured when the tween actually begins (after its delay), so chained
tweens pick up where the previous one left the property.

A Timeline owns every live tween and timer of one direction run, which
lets a run be torn down at once with `cancel_all()`.

Usage:
    timeline = Timeline(FrameClock(60.0))
    tween = timeline.to(lambda: node.transform.pos, (0, 2, 0), 0.5,
                        ease="power2.out",
                        on_update=lambda v: node.transform.pos.__setitem__(slice(None), v))
    await tween
"""

from __future__ import annotations
import asyncio
import logging
from typing import Any, Callable, Generator, List, Optional, Set, Union

import numpy as np

from ..core.math3d import EaseFunc, get_ease, ease_linear, lerp
from ..errors import TweenCancelled
from .clock import FrameClock

logger = logging.getLogger(__name__)

TweenValue = Union[float, np.ndarray]
StartValue = Union[TweenValue, Callable[[], Any]]


def _as_value(value: Any) -> TweenValue:
    if isinstance(value, (int, float)):
        return float(value)
    return np.array(value, dtype=np.float64)


class Tween:
    """
    One interpolation (or, with no update callback, a plain timer).

    Await it to wait for completion. Awaiting a cancelled tween raises
    TweenCancelled; an exception raised from `on_update` is re-raised to
    the awaiter.
    """

    def __init__(
        self,
        start: StartValue,
        end: Any,
        duration: float,
        ease: Union[str, EaseFunc, None] = None,
        on_update: Optional[Callable[[TweenValue], None]] = None,
        delay: float = 0.0,
        clock: Optional[FrameClock] = None,
        name: str = "",
    ):
        self._start = start
        self.end = _as_value(end)
        self.duration = max(0.0, float(duration))
        self.ease: EaseFunc = get_ease(ease) if (ease is None or isinstance(ease, str)) else ease
        self.on_update = on_update
        self.delay = max(0.0, float(delay))
        self.clock = clock or FrameClock()
        self.name = name

        self.start_value: Optional[TweenValue] = None
        self.progress: float = 0.0

        self._task: Optional[asyncio.Task] = None
        self._done: Optional[asyncio.Future] = None
        self._cancelled = False
        self._error: Optional[BaseException] = None
        self._done_callbacks: List[Callable[[Tween], None]] = []

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def done(self) -> bool:
        return self._done is not None and self._done.done()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def value_at(self, progress: float) -> TweenValue:
        """Interpolated value for linear progress in [0, 1]."""
        if self.start_value is None:
            raise RuntimeError("tween has not started")
        if progress >= 1.0:
            return self.end if isinstance(self.end, float) else self.end.copy()
        eased = self.ease(progress)
        return lerp(self.start_value, self.end, eased)

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def start(self) -> Tween:
        """Schedule the tween on the running loop. Idempotent."""
        if self._done is None:
            loop = asyncio.get_running_loop()
            self._done = loop.create_future()
            if self._cancelled:
                self._resolve()
            else:
                self._task = loop.create_task(self._run())
        return self

    def cancel(self) -> bool:
        """Stop the tween where it is. Returns False if it already finished."""
        if self.done:
            return False
        self._cancelled = True
        if self._task is not None:
            self._task.cancel()
            self._resolve()
        return True

    def add_done_callback(self, fn: Callable[[Tween], None]):
        self._done_callbacks.append(fn)

    async def wait(self):
        self.start()
        await asyncio.shield(self._done)
        if self._cancelled:
            raise TweenCancelled(f"tween {self.name or id(self)} cancelled")
        if self._error is not None:
            raise self._error

    def __await__(self) -> Generator[Any, None, None]:
        return self.wait().__await__()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _run(self):
        try:
            if self.delay > 0:
                await self.clock.sleep(self.delay)
            start = self._start() if callable(self._start) else self._start
            self.start_value = _as_value(start)

            async for frame in self.clock.frames(self.duration):
                self.progress = frame.progress(self.duration)
                if self.on_update is not None:
                    self.on_update(self.value_at(self.progress))
        except asyncio.CancelledError:
            self._cancelled = True
        except Exception as e:
            self._error = e
        finally:
            self._resolve()

    def _resolve(self):
        if self._done is not None and not self._done.done():
            self._done.set_result(None)
            for fn in self._done_callbacks:
                try:
                    fn(self)
                except Exception as e:
                    logger.error(f"Tween done callback error: {e}")

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else ("done" if self.done else "live")
        return f"Tween(name={self.name!r}, duration={self.duration}, {state})"


class Timeline:
    """Owns the live tweens and timers of one direction run."""

    def __init__(self, clock: Optional[FrameClock] = None):
        self.clock = clock or FrameClock()
        self._active: Set[Tween] = set()

    @property
    def active_count(self) -> int:
        return len(self._active)

    def to(
        self,
        start: StartValue,
        end: Any,
        duration: float,
        ease: Union[str, EaseFunc, None] = None,
        on_update: Optional[Callable[[TweenValue], None]] = None,
        delay: float = 0.0,
        name: str = "",
    ) -> Tween:
        """Create and start a tween tracked by this timeline."""
        tween = Tween(start, end, duration, ease=ease, on_update=on_update,
                      delay=delay, clock=self.clock, name=name)
        return self._track(tween)

    def delay(self, seconds: float, name: str = "delay") -> Tween:
        """A cancelable timer: a linear tween with nothing to update."""
        return self._track(Tween(0.0, 1.0, seconds, ease=ease_linear,
                                 clock=self.clock, name=name))

    def cancel_all(self) -> int:
        """Cancel every live tween. Returns how many were cancelled."""
        count = 0
        for tween in list(self._active):
            if tween.cancel():
                count += 1
        self._active.clear()
        if count:
            logger.debug(f"Timeline cancelled {count} live tween(s)")
        return count

    def _track(self, tween: Tween) -> Tween:
        self._active.add(tween)
        tween.add_done_callback(self._active.discard)
        tween.start()
        return tween
