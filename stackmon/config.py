"""
Monitor settings.

Defaults can be overridden with STACKMON_* environment variables; the
refresh interval given on the command line takes precedence over both.
"""

import logging
import os

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.3
ENV_PREFIX = "STACKMON_"


class MonitorSettings(BaseModel):
    """Timing knobs for the refresh loop and runtime calls (seconds)."""

    interval: float = Field(default=DEFAULT_INTERVAL, gt=0, description="Refresh interval")
    runtime_timeout: float = Field(
        default=5.0, gt=0, description="Timeout applied to every Docker API call"
    )
    collect_timeout_ratio: float = Field(
        default=0.8,
        gt=0,
        le=1,
        description="Share of the interval the per-cycle lookups may take",
    )
    min_collect_timeout: float = Field(
        default=1.0,
        gt=0,
        description="Lower bound for the per-cycle lookup deadline",
    )

    @property
    def collect_timeout(self) -> float:
        """Deadline for joining the per-service lookups of one cycle."""
        return max(self.min_collect_timeout, self.interval * self.collect_timeout_ratio)

    def with_interval(self, interval: float | None) -> "MonitorSettings":
        if interval is None:
            return self
        return self.model_copy(update={"interval": interval})

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "MonitorSettings":
        """
        Build settings from STACKMON_* environment variables.

        Invalid values are logged and the defaults are used instead.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip():
                values[name] = raw.strip()

        try:
            return cls(**values)
        except ValidationError as exc:
            logger.warning("Ignoring invalid %s settings: %s", ENV_PREFIX, exc)
            return cls()
