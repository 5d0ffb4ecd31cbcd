"""
Dashboard aggregation and rendering.

build_frame() turns the statuses of one poll into a DashboardFrame (grouped
lines, counts, overall summary). DashboardUI turns a frame into Rich
renderables. Keeping the two apart lets the aggregation be tested without a
terminal.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from stackmon.monitor.classifier import CountBucket, DisplayCategory, classify
from stackmon.monitor.status_collector import ContainerStatus
from stackmon.registry import ServiceCategory, ServiceRegistry

NAME_WIDTH = 12
DEFAULT_TITLE = "🔍 Microservices Monitor"


class OverallSummary(Enum):
    """One-line verdict for the whole stack."""

    ALL_HEALTHY = ("🎉 All services healthy", "green")
    STARTING_UP = ("⏳ Services starting up", "yellow")
    NONE_RUNNING = ("🛑 No services running", "red")

    def __init__(self, text: str, style: str):
        self.text = text
        self.style = style


@dataclass(frozen=True)
class StatusCounts:
    total: int = 0
    healthy: int = 0
    starting: int = 0
    stopped: int = 0

    @property
    def summary(self) -> OverallSummary:
        if self.healthy == self.total:
            return OverallSummary.ALL_HEALTHY
        if self.healthy + self.starting > 0:
            return OverallSummary.STARTING_UP
        return OverallSummary.NONE_RUNNING


@dataclass(frozen=True)
class ServiceLine:
    """Rendered state of one service."""

    name: str
    port: str
    category: DisplayCategory

    @property
    def text(self) -> str:
        return f"{self.name:<{NAME_WIDTH}} {self.category.display} :{self.port}"


@dataclass
class DashboardFrame:
    """Snapshot of the dashboard for one cycle."""

    timestamp: datetime
    sections: dict[ServiceCategory, list[ServiceLine]]
    counts: StatusCounts
    runtime_error: str | None = None
    timed_out: tuple[str, ...] = field(default_factory=tuple)

    @property
    def summary(self) -> OverallSummary:
        return self.counts.summary

    def lines(self) -> list[str]:
        """All service lines as plain text, section by section."""
        return [line.text for section in self.sections.values() for line in section]


def build_frame(
    registry: ServiceRegistry,
    statuses: Mapping[str, ContainerStatus],
    now: datetime | None = None,
    runtime_error: str | None = None,
    timed_out: Iterable[str] = (),
) -> DashboardFrame:
    """
    Aggregate one poll into a frame.

    Services missing from ``statuses`` are treated as not found, so the
    counts always cover the whole registry.
    """
    sections: dict[ServiceCategory, list[ServiceLine]] = {c: [] for c in ServiceCategory}
    tally = {bucket: 0 for bucket in CountBucket}

    for service in registry:
        status = statuses.get(service.container_id)
        if status is None:
            status = ContainerStatus.not_found(service.container_id)
        category = classify(status)
        tally[category.bucket] += 1
        sections[service.category].append(ServiceLine(service.name, service.port, category))

    counts = StatusCounts(
        total=len(registry),
        healthy=tally[CountBucket.HEALTHY],
        starting=tally[CountBucket.STARTING],
        stopped=tally[CountBucket.STOPPED],
    )
    return DashboardFrame(
        timestamp=now or datetime.now(),
        sections=sections,
        counts=counts,
        runtime_error=runtime_error,
        timed_out=tuple(timed_out),
    )


class DashboardUI:
    """
    Rich presentation of dashboard frames.

    Example:
        >>> ui = DashboardUI()
        >>> live.update(ui.render(frame, elapsed=0.012, interval=0.3))
    """

    def __init__(self, title: str = DEFAULT_TITLE):
        self.title = title

    @staticmethod
    def format_counts(counts: StatusCounts) -> Text:
        """
        Format the totals line.

        Example:
            >>> DashboardUI.format_counts(StatusCounts(3, 1, 1, 1)).plain
            '✅ 1  ⏳ 1  ❌ 1  📊 3'
        """
        text = Text()
        text.append(f"✅ {counts.healthy}", style="green")
        text.append(f"  ⏳ {counts.starting}", style="yellow")
        text.append(f"  ❌ {counts.stopped}", style="red")
        text.append(f"  📊 {counts.total}", style="blue")
        return text

    @staticmethod
    def format_timing(elapsed: float, interval: float) -> str:
        """
        Format the per-cycle timing line.

        Example:
            >>> DashboardUI.format_timing(0.0124, 0.3)
            'Update: 12ms | Next in 300ms'
        """
        return f"Update: {elapsed * 1000:.0f}ms | Next in {interval * 1000:.0f}ms"

    @staticmethod
    def format_stopped() -> str:
        return "👋 Monitor stopped"

    def _render_section(self, category: ServiceCategory, lines: list[ServiceLine]) -> Table:
        table = Table.grid(padding=(0, 1))
        table.add_column(min_width=NAME_WIDTH)
        table.add_column(min_width=14)
        table.add_column()
        table.title = category.title
        table.title_style = "bold white"
        table.title_justify = "left"

        if not lines:
            table.add_row(Text("No services", style="dim"), "", "")
        for line in lines:
            table.add_row(
                line.name,
                Text(line.category.display, style=line.category.style),
                Text(f":{line.port}", style="cyan"),
            )
        return table

    def _render_footer(self, frame: DashboardFrame) -> Text:
        footer = self.format_counts(frame.counts)
        footer.append(" │ ")
        footer.append(frame.summary.text, style=frame.summary.style)
        return footer

    def render_frame(self, frame: DashboardFrame) -> Panel:
        """Render a frame as a single framed panel."""
        parts: list = []
        if frame.runtime_error:
            parts.append(Text(f"🔌 Runtime unreachable: {frame.runtime_error}", style="bold red"))
            parts.append(Text(""))

        for category, lines in frame.sections.items():
            parts.append(self._render_section(category, lines))
            parts.append(Text(""))

        if frame.timed_out:
            parts.append(
                Text(f"⌛ No answer in time from: {', '.join(frame.timed_out)}", style="yellow")
            )
        parts.append(self._render_footer(frame))

        title = Text()
        title.append(self.title, style="cyan")
        title.append(f"  {frame.timestamp.strftime('%H:%M:%S')}", style="bright_black")
        return Panel(Group(*parts), title=title, title_align="left", border_style="white")

    def render(self, frame: DashboardFrame, elapsed: float, interval: float) -> Group:
        """Render a frame followed by the hint and timing lines."""
        hint = Text.assemble(
            ("⚡ ", "bright_black"),
            ("Ctrl+C", "cyan"),
            (" to exit", "bright_black"),
        )
        timing = Text(self.format_timing(elapsed, interval), style="bright_black")
        return Group(self.render_frame(frame), hint, timing)
