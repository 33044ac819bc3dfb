import asyncio

import pytest

from photosim.engine.scheduler import AsyncioTickSource, ManualTickSource
from photosim.engine.simulator import ControlInputs, SimulationEngine


def test_manual_source_requires_start() -> None:
    source = ManualTickSource(SimulationEngine())

    with pytest.raises(RuntimeError):
        source.step()

    source.start()
    assert source.running
    assert source.step(7) == 7
    assert source.engine.simulated_time == pytest.approx(0.7)


def test_manual_source_counts_paused_frames_without_advancing() -> None:
    engine = SimulationEngine(controls=ControlInputs(is_paused=True))
    source = ManualTickSource(engine)
    source.start()

    assert source.step(5) == 0
    assert source.frames == 5
    assert engine.simulated_time == 0.0


def test_asyncio_source_ticks_until_stopped() -> None:
    engine = SimulationEngine()

    async def scenario() -> tuple[float, float]:
        source = AsyncioTickSource(engine, interval_s=0.0)
        source.start()
        await asyncio.sleep(0.02)
        source.stop()
        stopped_at = engine.simulated_time
        await asyncio.sleep(0.02)
        assert not source.running
        return stopped_at, engine.simulated_time

    stopped_at, later = asyncio.run(scenario())

    assert stopped_at > 0.0
    assert later == stopped_at


def test_asyncio_source_keeps_rescheduling_while_paused() -> None:
    engine = SimulationEngine(controls=ControlInputs(is_paused=True))

    async def scenario() -> int:
        async with AsyncioTickSource(engine, interval_s=0.0) as source:
            await asyncio.sleep(0.01)
            paused_frames = source.frames
            assert source.running
            engine.controls.is_paused = False
            await asyncio.sleep(0.01)
        return paused_frames

    paused_frames = asyncio.run(scenario())

    assert paused_frames > 1
    assert engine.simulated_time > 0.0


def test_asyncio_source_start_is_idempotent() -> None:
    engine = SimulationEngine()

    async def scenario() -> int:
        source = AsyncioTickSource(engine, interval_s=0.0)
        source.start()
        source.start()
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        source.stop()
        source.stop()
        return source.frames

    frames = asyncio.run(scenario())

    assert frames >= 1
    assert engine.history.time[-frames:].tolist() == pytest.approx(
        [round(0.1 * (idx + 1), 1) for idx in range(frames)]
    )


def test_negative_interval_is_rejected() -> None:
    with pytest.raises(ValueError):
        AsyncioTickSource(SimulationEngine(), interval_s=-1.0)


class _FailingEngine(SimulationEngine):
    def tick(self) -> bool:
        msg = "tick failed"
        raise RuntimeError(msg)


def test_asyncio_source_stops_when_tick_raises() -> None:
    engine = _FailingEngine()

    async def scenario() -> tuple[bool, int, bool]:
        loop = asyncio.get_running_loop()
        errors: list[BaseException] = []
        loop.set_exception_handler(lambda _loop, context: errors.append(context["exception"]))
        source = AsyncioTickSource(engine, interval_s=0.0)
        source.start()
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        stopped = not source.running
        frames = source.frames
        source.start()
        restarted = source.running
        source.stop()
        assert len(errors) == 1
        assert isinstance(errors[0], RuntimeError)
        return stopped, frames, restarted

    stopped, frames, restarted = asyncio.run(scenario())

    assert stopped
    assert frames == 1
    assert restarted
