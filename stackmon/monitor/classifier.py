"""
Maps a resolved container status to the category shown on the dashboard.
"""

from enum import Enum

from stackmon.monitor.status_collector import ContainerStatus, Health


class CountBucket(Enum):
    """Buckets used for the aggregate counts line."""

    HEALTHY = "healthy"
    STARTING = "starting"
    STOPPED = "stopped"


class DisplayCategory(Enum):
    """Per-service display state with its icon, label and style."""

    HEALTHY = ("✅", "HEALTHY", "green")
    STARTING = ("⏳", "STARTING", "yellow")
    UNHEALTHY = ("⚠️ ", "UNHEALTHY", "red")
    RESTARTING = ("🔄", "RESTARTING", "yellow")
    PAUSED = ("⏸️ ", "PAUSED", "blue")
    STOPPED = ("⚫", "STOPPED", "bright_black")

    def __init__(self, icon: str, label: str, style: str):
        self.icon = icon
        self.label = label
        self.style = style

    @property
    def bucket(self) -> CountBucket:
        if self is DisplayCategory.HEALTHY:
            return CountBucket.HEALTHY
        if self is DisplayCategory.STARTING:
            return CountBucket.STARTING
        return CountBucket.STOPPED

    @property
    def display(self) -> str:
        return f"{self.icon} {self.label}"


def classify(status: ContainerStatus) -> DisplayCategory:
    """
    Classify a container status. Rules are evaluated in order:

    1. running and healthy (or without a healthcheck) -> HEALTHY
    2. running and starting -> STARTING
    3. running and unhealthy -> UNHEALTHY
    4. run state "restarting" -> RESTARTING
    5. run state "paused" -> PAUSED
    6. anything else -> STOPPED

    A running container reporting a health value outside the known ones
    falls through to the run-state rules.
    """
    if status.running:
        if status.health in (Health.HEALTHY, Health.NO_HEALTHCHECK):
            return DisplayCategory.HEALTHY
        if status.health == Health.STARTING:
            return DisplayCategory.STARTING
        if status.health == Health.UNHEALTHY:
            return DisplayCategory.UNHEALTHY

    if status.run_state == "restarting":
        return DisplayCategory.RESTARTING
    if status.run_state == "paused":
        return DisplayCategory.PAUSED
    return DisplayCategory.STOPPED
