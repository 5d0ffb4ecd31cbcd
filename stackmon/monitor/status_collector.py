"""
Resolves the run state and health of every tracked service.

One poll lists the runtime's containers once and fans out one lookup per
service over a thread pool. All lookups read the same container snapshot and
each reports through its own future, so no shared structure is written
concurrently.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum

from stackmon.exceptions import RuntimeQueryError
from stackmon.registry import Service, ServiceRegistry
from stackmon.runtime import ContainerRuntime, RuntimeContainerInfo

logger = logging.getLogger(__name__)

NOT_RUNNING = "NOT_RUNNING"
DEFAULT_COLLECT_TIMEOUT = 1.0


class Health(str, Enum):
    """Known health values. Anything else the runtime reports is kept as-is."""

    HEALTHY = "healthy"
    STARTING = "starting"
    UNHEALTHY = "unhealthy"
    NO_HEALTHCHECK = "no-healthcheck"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ContainerStatus:
    """Status of one tracked service for a single poll."""

    container_id: str
    run_state: str = NOT_RUNNING
    health: str = Health.UNKNOWN.value
    running: bool = False
    match_count: int = 0

    @classmethod
    def not_found(cls, container_id: str) -> "ContainerStatus":
        return cls(container_id=container_id)


@dataclass
class CollectionResult:
    """Outcome of one poll: a status for every registered service."""

    statuses: dict[str, ContainerStatus]
    error: str | None = None
    timed_out: tuple[str, ...] = field(default_factory=tuple)

    @property
    def degraded(self) -> bool:
        return self.error is not None or bool(self.timed_out)


def find_container(
    container_id: str, containers: list[RuntimeContainerInfo]
) -> tuple[RuntimeContainerInfo | None, int]:
    """
    Find the first container having a name that contains ``container_id``.

    Returns:
        The first match in listing order (or None) and the number of
        containers that matched
    """
    matches = [c for c in containers if any(container_id in name for name in c.names)]
    return (matches[0] if matches else None), len(matches)


class StatusCollector:
    """Collects a ContainerStatus for every service in the registry."""

    def __init__(
        self,
        registry: ServiceRegistry,
        runtime: ContainerRuntime,
        collect_timeout: float = DEFAULT_COLLECT_TIMEOUT,
    ) -> None:
        """
        Args:
            registry: Services to resolve
            runtime: Runtime used for list and inspect calls
            collect_timeout: Seconds to wait for all lookups of one poll
        """
        self.registry = registry
        self.runtime = runtime
        self.collect_timeout = collect_timeout
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, len(registry)), thread_name_prefix="stackmon-lookup"
        )

    def poll(self) -> CollectionResult:
        """List containers once and resolve every service against that list."""
        try:
            containers = self.runtime.list_containers(include_stopped=True)
        except RuntimeQueryError as exc:
            logger.warning("Container list unavailable: %s", exc)
            statuses = {
                cid: ContainerStatus.not_found(cid) for cid in self.registry.container_ids()
            }
            return CollectionResult(statuses=statuses, error=str(exc))
        return self.collect(containers)

    def collect(self, containers: list[RuntimeContainerInfo]) -> CollectionResult:
        """
        Resolve every service against a container snapshot.

        Lookups that have not reported within ``collect_timeout`` keep the
        default status and are listed in ``timed_out``.
        """
        snapshot = list(containers)
        futures: dict[str, Future[ContainerStatus]] = {
            service.container_id: self._executor.submit(self._resolve, service, snapshot)
            for service in self.registry
        }
        done, _ = wait(futures.values(), timeout=self.collect_timeout)

        statuses: dict[str, ContainerStatus] = {}
        timed_out: list[str] = []
        for container_id, future in futures.items():
            if future not in done:
                future.cancel()
                timed_out.append(container_id)
                statuses[container_id] = ContainerStatus.not_found(container_id)
                continue
            try:
                statuses[container_id] = future.result()
            except Exception as exc:
                logger.error("Lookup for %s failed: %s", container_id, exc)
                statuses[container_id] = ContainerStatus.not_found(container_id)

        if timed_out:
            logger.warning(
                "%d lookup(s) exceeded %.2fs: %s",
                len(timed_out),
                self.collect_timeout,
                ", ".join(timed_out),
            )
        return CollectionResult(statuses=statuses, timed_out=tuple(timed_out))

    def _resolve(self, service: Service, containers: list[RuntimeContainerInfo]) -> ContainerStatus:
        match, match_count = find_container(service.container_id, containers)
        if match is None:
            return ContainerStatus.not_found(service.container_id)

        if match_count > 1:
            logger.debug(
                "%d containers match %s, using %s",
                match_count,
                service.container_id,
                match.names[0] if match.names else match.id,
            )

        running = match.state == "running"
        health = Health.UNKNOWN.value
        if running:
            health = self._inspect_health(match)

        return ContainerStatus(
            container_id=service.container_id,
            run_state=match.state,
            health=health,
            running=running,
            match_count=match_count,
        )

    def _inspect_health(self, container: RuntimeContainerInfo) -> str:
        try:
            inspection = self.runtime.inspect_container(container.id)
        except RuntimeQueryError as exc:
            logger.debug("Health inspection failed: %s", exc)
            return Health.NO_HEALTHCHECK.value
        if not inspection.health_status:
            return Health.NO_HEALTHCHECK.value
        return inspection.health_status

    def close(self) -> None:
        """Release the lookup threads without waiting for hung calls."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "StatusCollector":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
