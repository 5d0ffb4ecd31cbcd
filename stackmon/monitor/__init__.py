from .classifier import CountBucket, DisplayCategory, classify
from .dashboard_ui import DashboardFrame, DashboardUI, OverallSummary, StatusCounts, build_frame
from .scheduler import RefreshScheduler, SchedulerState
from .status_collector import CollectionResult, ContainerStatus, Health, StatusCollector

__all__ = [
    "StatusCollector",
    "CollectionResult",
    "ContainerStatus",
    "Health",
    "DisplayCategory",
    "CountBucket",
    "classify",
    "DashboardFrame",
    "DashboardUI",
    "OverallSummary",
    "StatusCounts",
    "build_frame",
    "RefreshScheduler",
    "SchedulerState",
]
