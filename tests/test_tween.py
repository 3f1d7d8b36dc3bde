import asyncio
import time

import numpy as np
import pytest

from director.core.frame import FrameState
from director.errors import TweenCancelled
from director.time import FrameClock, Timeline, Tween


def test_clock_yields_at_least_one_frame():
    async def collect():
        return [f async for f in FrameClock(60.0).frames(0.0)]

    frames = asyncio.run(collect())
    assert len(frames) == 1
    assert frames[0].t == 0.0


def test_clock_last_frame_is_clamped_to_duration():
    async def collect():
        return [f async for f in FrameClock(120.0).frames(0.1)]

    frames = asyncio.run(collect())
    assert frames[-1].t == 0.1
    assert [f.frame_id for f in frames] == list(range(1, len(frames) + 1))


def test_clock_rejects_bad_rate():
    with pytest.raises(ValueError):
        FrameClock(0.0)


def test_frame_progress_is_clamped():
    frame = FrameState(frame_id=3, dt=0.5, t=0.75)
    assert frame.progress(1.5) == 0.5
    assert frame.progress(0.5) == 1.0
    assert frame.progress(0.0) == 1.0
    assert frame.fps == 2.0


def test_tween_reaches_exact_end_value():
    seen = []

    async def run():
        tween = Tween(0.0, 10.0, 0.1, ease="power2.out", on_update=seen.append)
        await tween
        return tween

    tween = asyncio.run(run())
    assert tween.done
    assert not tween.cancelled
    assert seen[-1] == 10.0
    # Monotonic for an ease-out curve
    assert all(a <= b for a, b in zip(seen, seen[1:]))


def test_tween_vector_and_start_captured_after_delay():
    pos = np.array([0.0, 0.0, 0.0])

    def apply(v):
        pos[:] = v

    async def run():
        tween = Tween(lambda: pos, (1.0, 2.0, 3.0), 0.05, on_update=apply, delay=0.05)
        await asyncio.sleep(0.01)
        # Moved before the tween starts; the tween must pick this up
        pos[:] = (5.0, 5.0, 5.0)
        tween.start()
        await tween
        return tween

    tween = asyncio.run(run())
    assert np.allclose(tween.start_value, [5.0, 5.0, 5.0])
    assert np.allclose(pos, [1.0, 2.0, 3.0])


def test_cancelled_tween_raises_to_awaiter():
    values = []

    async def run():
        tween = Tween(0.0, 1.0, 1.0, on_update=values.append).start()
        await asyncio.sleep(0.05)
        assert tween.cancel()
        with pytest.raises(TweenCancelled):
            await tween
        return tween

    tween = asyncio.run(run())
    assert tween.cancelled
    assert not tween.cancel()
    assert values[-1] < 1.0


def test_update_error_reaches_awaiter():
    def boom(value):
        raise RuntimeError("bad update")

    async def run():
        await Tween(0.0, 1.0, 0.05, on_update=boom)

    with pytest.raises(RuntimeError, match="bad update"):
        asyncio.run(run())


def test_timeline_delay_waits():
    async def run():
        timeline = Timeline()
        start = time.monotonic()
        await timeline.delay(0.1)
        return time.monotonic() - start, timeline.active_count

    elapsed, active = asyncio.run(run())
    assert elapsed >= 0.09
    assert active == 0


def test_timeline_cancel_all():
    async def run():
        timeline = Timeline()
        a = timeline.to(0.0, 1.0, 1.0)
        b = timeline.delay(1.0)
        await asyncio.sleep(0.02)
        assert timeline.active_count == 2
        cancelled = timeline.cancel_all()
        return cancelled, a, b, timeline.active_count

    cancelled, a, b, active = asyncio.run(run())
    assert cancelled == 2
    assert a.cancelled and b.cancelled
    assert active == 0
