"""Frame scheduler: drives a GraphSession once per display refresh.

The scheduler is a single asyncio task. Each frame runs session.tick()
and hands the session to on_frame when something visible changed. When
the session has nothing to do it parks on an asyncio.Event until new work
(load, clock change, command) wakes it, so an idle graph costs nothing.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable

from edugraph.config import settings
from edugraph.interaction.session import GraphSession

logger = logging.getLogger(__name__)


class FrameScheduler:
    """Cooperative frame loop for one session."""

    def __init__(
        self,
        session: GraphSession,
        frame_rate: float | None = None,
        on_frame: Callable[[GraphSession], None] | None = None,
    ) -> None:
        self.session = session
        self.frame_rate = frame_rate or session.config.frame_rate or settings.frame_rate
        self.on_frame = on_frame
        self.frames = 0
        self._wake = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def interval(self) -> float:
        return 1.0 / self.frame_rate

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def wake(self) -> None:
        self._wake.set()

    def start(self) -> asyncio.Task:
        """Start the loop on the running event loop."""
        if self._task is not None and not self._task.done():
            return self._task
        self.session.on_activity = self.wake
        self._task = asyncio.create_task(self.run())
        logger.debug(f"Frame scheduler started at {self.frame_rate:.0f} fps")
        return self._task

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        task, self._task = self._task, None
        if self.session.on_activity == self.wake:
            self.session.on_activity = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug(f"Frame scheduler stopped after {self.frames} frames")

    async def run(self) -> None:
        """Frame loop; runs until cancelled."""
        while True:
            if not self.session.needs_frame:
                self._wake.clear()
                # Re-check after clearing so a wake between the two is not lost
                if not self.session.needs_frame:
                    await self._wake.wait()
                continue

            self.step()
            await asyncio.sleep(self.interval)

    def step(self) -> bool:
        """Run exactly one frame."""
        changed = self.session.tick()
        self.frames += 1
        if changed and self.on_frame is not None:
            self.on_frame(self.session)
        return changed

    async def run_until_idle(self, max_frames: int = 10_000) -> int:
        """Run frames until the session settles; returns frames run."""
        ran = 0
        while self.session.needs_frame and ran < max_frames:
            self.step()
            ran += 1
            await asyncio.sleep(0)
        return ran
