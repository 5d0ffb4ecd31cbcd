"""
Tests for the status classifier.
"""

import pytest

from stackmon.monitor.classifier import CountBucket, DisplayCategory, classify
from stackmon.monitor.status_collector import NOT_RUNNING, ContainerStatus, Health


def running(health: str, run_state: str = "running") -> ContainerStatus:
    return ContainerStatus("cid", run_state=run_state, health=health, running=True)


def stopped(run_state: str) -> ContainerStatus:
    return ContainerStatus("cid", run_state=run_state, health=Health.UNKNOWN.value, running=False)


class TestClassifyRules:
    """Each rule in evaluation order."""

    @pytest.mark.parametrize("health", ["healthy", "no-healthcheck"])
    def test_running_and_healthy(self, health):
        assert classify(running(health)) is DisplayCategory.HEALTHY

    def test_running_and_starting(self):
        assert classify(running("starting")) is DisplayCategory.STARTING

    def test_running_and_unhealthy(self):
        assert classify(running("unhealthy")) is DisplayCategory.UNHEALTHY

    def test_restarting(self):
        assert classify(stopped("restarting")) is DisplayCategory.RESTARTING

    def test_paused(self):
        assert classify(stopped("paused")) is DisplayCategory.PAUSED

    @pytest.mark.parametrize("run_state", ["exited", "created", "dead", NOT_RUNNING, ""])
    def test_everything_else_is_stopped(self, run_state):
        assert classify(stopped(run_state)) is DisplayCategory.STOPPED

    def test_default_status_is_stopped(self):
        assert classify(ContainerStatus.not_found("cid")) is DisplayCategory.STOPPED

    def test_running_health_wins_over_run_state(self):
        """The running flag is checked before the run state string."""
        assert classify(running("healthy", run_state="paused")) is DisplayCategory.HEALTHY

    def test_running_with_unknown_health_falls_through(self):
        assert classify(running("weird")) is DisplayCategory.STOPPED
        assert classify(running("weird", run_state="restarting")) is DisplayCategory.RESTARTING

    def test_health_enum_values_classify_like_strings(self):
        status = ContainerStatus("cid", run_state="running", health=Health.STARTING, running=True)
        assert classify(status) is DisplayCategory.STARTING


class TestClassifyPurity:
    def test_deterministic(self):
        status = running("starting")
        assert classify(status) is classify(status)

    def test_does_not_modify_status(self):
        status = running("unhealthy")
        before = ContainerStatus(**status.__dict__)
        classify(status)
        assert status == before


class TestBuckets:
    """Display categories collapse into three count buckets."""

    def test_bucket_mapping(self):
        assert DisplayCategory.HEALTHY.bucket is CountBucket.HEALTHY
        assert DisplayCategory.STARTING.bucket is CountBucket.STARTING
        for category in (
            DisplayCategory.UNHEALTHY,
            DisplayCategory.RESTARTING,
            DisplayCategory.PAUSED,
            DisplayCategory.STOPPED,
        ):
            assert category.bucket is CountBucket.STOPPED

    def test_display_text(self):
        assert DisplayCategory.HEALTHY.display == "✅ HEALTHY"
        assert DisplayCategory.STOPPED.label == "STOPPED"
        assert DisplayCategory.PAUSED.style == "blue"
