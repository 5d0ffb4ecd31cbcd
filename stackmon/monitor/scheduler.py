"""
Fixed-interval refresh loop.

Each cycle polls the collector, builds a frame, hands it to the display and
waits out the rest of the interval. A cycle that overruns the interval is
followed immediately by the next one; missed cycles are not caught up.
Cancellation is checked between cycles, so a cycle in progress always
finishes and is displayed.
"""

import logging
import threading
import time
from collections.abc import Callable
from enum import Enum

from rich.console import Group, RenderableType
from rich.text import Text

from stackmon.monitor.dashboard_ui import DashboardFrame, DashboardUI, build_frame
from stackmon.monitor.status_collector import StatusCollector
from stackmon.registry import ServiceRegistry

logger = logging.getLogger(__name__)

Display = Callable[[RenderableType], None]


class SchedulerState(Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class RefreshScheduler:
    """
    Drives the collect/render cycle until stopped.

    Attributes:
        interval: Seconds between cycle starts
        state: Current SchedulerState
        cycles: Number of cycles run, including ones that raised
        last_frame: Frame produced by the most recent cycle
    """

    def __init__(
        self,
        collector: StatusCollector,
        registry: ServiceRegistry,
        display: Display,
        interval: float,
        ui: DashboardUI | None = None,
        stop_event: threading.Event | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.collector = collector
        self.registry = registry
        self.display = display
        self.interval = interval
        self.ui = ui or DashboardUI()
        self.stop_event = stop_event or threading.Event()
        self.clock = clock
        self.state = SchedulerState.STOPPED
        self.cycles = 0
        self.last_frame: DashboardFrame | None = None
        self._last_render: RenderableType | None = None

    def stop(self) -> None:
        """Request the loop to exit after the current cycle. Safe from signal handlers."""
        self.stop_event.set()

    def run_cycle(self) -> float:
        """
        Run one collect/render cycle.

        The timing line shows the collection time. The returned value also
        covers rendering and display.

        Returns:
            Seconds spent on the cycle
        """
        start = self.clock()
        result = self.collector.poll()
        frame = build_frame(
            self.registry,
            result.statuses,
            runtime_error=result.error,
            timed_out=result.timed_out,
        )
        elapsed = self.clock() - start

        self.last_frame = frame
        self._last_render = self.ui.render(frame, elapsed=elapsed, interval=self.interval)
        self.display(self._last_render)
        return self.clock() - start

    def next_delay(self, elapsed: float) -> float:
        """Time to wait before the next cycle; zero when the cycle overran."""
        return max(0.0, self.interval - elapsed)

    def run(self) -> int:
        """
        Run cycles until the stop event is set.

        Returns:
            Number of cycles run
        """
        self.state = SchedulerState.RUNNING
        logger.debug("Refresh loop started (interval %.3fs)", self.interval)
        try:
            while not self.stop_event.is_set():
                try:
                    elapsed = self.run_cycle()
                except Exception as exc:
                    logger.exception("Refresh cycle failed: %s", exc)
                    elapsed = 0.0
                self.cycles += 1
                self.stop_event.wait(self.next_delay(elapsed))
        finally:
            self.state = SchedulerState.STOPPED
            self.display(self._render_stopped())
            logger.debug("Refresh loop stopped after %d cycles", self.cycles)
        return self.cycles

    def _render_stopped(self) -> RenderableType:
        message = Text(f"\n{self.ui.format_stopped()}", style="bright_black")
        if self._last_render is None:
            return message
        return Group(self._last_render, message)
