"""
Container runtime access.

Thin wrapper over the Docker SDK exposing the two calls the monitor needs:
listing all containers and inspecting one container's health.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import docker
from docker.errors import DockerException
from requests.exceptions import RequestException

from stackmon.exceptions import RuntimeQueryError, RuntimeUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_RUNTIME_TIMEOUT = 5.0


@dataclass(frozen=True)
class RuntimeContainerInfo:
    """One entry of the runtime's container list."""

    id: str
    names: tuple[str, ...]
    state: str

    @classmethod
    def from_api(cls, entry: dict[str, Any]) -> "RuntimeContainerInfo":
        """Build from a ``/containers/json`` entry."""
        return cls(
            id=entry.get("Id", ""),
            names=tuple(entry.get("Names") or ()),
            state=(entry.get("State") or "").lower(),
        )


@dataclass(frozen=True)
class ContainerInspection:
    """Subset of ``docker inspect`` the monitor uses."""

    health_status: str | None = None

    @classmethod
    def from_api(cls, details: dict[str, Any]) -> "ContainerInspection":
        health = (details.get("State") or {}).get("Health")
        if not health:
            return cls()
        return cls(health_status=health.get("Status"))


class ContainerRuntime(Protocol):
    """Capabilities the status collector relies on."""

    def list_containers(self, include_stopped: bool = True) -> list[RuntimeContainerInfo]: ...

    def inspect_container(self, container_id: str) -> ContainerInspection: ...


class DockerRuntime:
    """ContainerRuntime backed by the Docker Engine API."""

    def __init__(self, client: docker.DockerClient):
        self.client = client

    def list_containers(self, include_stopped: bool = True) -> list[RuntimeContainerInfo]:
        """
        List containers.

        Raises:
            RuntimeQueryError: If the daemon call fails or times out
        """
        try:
            entries = self.client.api.containers(all=include_stopped)
        except (DockerException, RequestException) as exc:
            raise RuntimeQueryError(f"Failed to list containers: {exc}") from exc
        return [RuntimeContainerInfo.from_api(entry) for entry in entries]

    def inspect_container(self, container_id: str) -> ContainerInspection:
        """
        Inspect a container's health state.

        Raises:
            RuntimeQueryError: If the daemon call fails or times out
        """
        try:
            details = self.client.api.inspect_container(container_id)
        except (DockerException, RequestException) as exc:
            raise RuntimeQueryError(f"Failed to inspect {container_id[:12]}: {exc}") from exc
        return ContainerInspection.from_api(details)

    def close(self) -> None:
        try:
            self.client.close()
        except (DockerException, RequestException) as exc:
            logger.debug("Error closing Docker client: %s", exc)


def connect(timeout: float = DEFAULT_RUNTIME_TIMEOUT) -> DockerRuntime:
    """
    Connect to the Docker daemon configured in the environment.

    Every later API call is bounded by ``timeout`` seconds.

    Raises:
        RuntimeUnavailableError: If the daemon cannot be reached
    """
    try:
        client = docker.from_env(timeout=timeout)
        client.ping()
    except (DockerException, RequestException) as exc:
        raise RuntimeUnavailableError(f"Error connecting to Docker: {exc}") from exc

    logger.debug("Connected to Docker daemon at %s", client.api.base_url)
    return DockerRuntime(client)
