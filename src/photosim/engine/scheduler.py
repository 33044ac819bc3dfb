from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from photosim.engine.simulator import SimulationEngine

logger = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL_S = 1.0 / 60.0


class TickSource(Protocol):
    """Decides when the engine ticks; the engine decides what a tick does."""

    @property
    def running(self) -> bool: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


class ManualTickSource:
    """Ticks only when asked, for tests and offline batch runs."""

    def __init__(self, engine: SimulationEngine) -> None:
        self.engine = engine
        self._running = False
        self.frames = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def step(self, n_frames: int = 1) -> int:
        """Deliver ``n_frames`` frames and return how many advanced the engine."""
        if not self._running:
            msg = "tick source is not running"
            raise RuntimeError(msg)
        advanced = 0
        for _ in range(n_frames):
            self.frames += 1
            advanced += int(self.engine.tick())
        return advanced


class AsyncioTickSource:
    """Self-rescheduling frame callback on an asyncio event loop.

    Every frame runs one engine tick and then books the next frame, so ticks
    never overlap. Paused frames still re-book themselves. ``stop`` cancels the
    pending frame and must be called when the owner is torn down.
    """

    def __init__(
        self,
        engine: SimulationEngine,
        interval_s: float = DEFAULT_FRAME_INTERVAL_S,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if interval_s < 0:
            msg = "interval_s must be non-negative"
            raise ValueError(msg)
        self.engine = engine
        self.interval_s = interval_s
        self._loop = loop
        self._handle: asyncio.Handle | None = None
        self.frames = 0

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None:
            return
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        logger.debug("Starting frame loop at %.4fs per frame", self.interval_s)
        self._handle = self._loop.call_soon(self._frame)

    def _frame(self) -> None:
        self.frames += 1
        try:
            self.engine.tick()
        except Exception:
            self.stop()
            raise
        if self._handle is None:
            # stop() was called from inside the tick.
            return
        self._handle = self._loop.call_later(self.interval_s, self._frame)

    def stop(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        logger.debug("Frame loop stopped after %d frames", self.frames)

    async def __aenter__(self) -> AsyncioTickSource:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.stop()


__all__ = [
    "DEFAULT_FRAME_INTERVAL_S",
    "AsyncioTickSource",
    "ManualTickSource",
    "TickSource",
]
