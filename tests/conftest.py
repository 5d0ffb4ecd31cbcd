"""Shared fixtures for the stackmon test suite."""

from __future__ import annotations

import threading

import pytest

from stackmon.exceptions import RuntimeQueryError
from stackmon.registry import Service, ServiceCategory, ServiceRegistry
from stackmon.runtime import ContainerInspection, RuntimeContainerInfo


class FakeRuntime:
    """In-memory ContainerRuntime.

    ``health`` maps a container id to the reported health status (None for
    "no healthcheck configured"); ids in ``failing_inspect`` raise.
    """

    def __init__(
        self,
        containers: list[RuntimeContainerInfo] | None = None,
        health: dict[str, str | None] | None = None,
        list_error: Exception | None = None,
        failing_inspect: set[str] | None = None,
    ):
        self.containers = containers or []
        self.health = health or {}
        self.list_error = list_error
        self.failing_inspect = failing_inspect or set()
        self.list_calls = 0
        self.inspect_calls: list[str] = []
        self._lock = threading.Lock()

    def list_containers(self, include_stopped: bool = True) -> list[RuntimeContainerInfo]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return list(self.containers)

    def inspect_container(self, container_id: str) -> ContainerInspection:
        with self._lock:
            self.inspect_calls.append(container_id)
        if container_id in self.failing_inspect:
            raise RuntimeQueryError(f"inspect {container_id} failed")
        return ContainerInspection(health_status=self.health.get(container_id))


def container(cid: str, name: str, state: str = "running") -> RuntimeContainerInfo:
    return RuntimeContainerInfo(id=cid, names=(f"/{name}",), state=state)


@pytest.fixture
def single_registry():
    return ServiceRegistry([Service("A", "cid-a", "8080", ServiceCategory.INFRA)])


@pytest.fixture
def mixed_registry():
    return ServiceRegistry(
        [
            Service("Mongo", "stack-mongo", "27017", ServiceCategory.INFRA),
            Service("Kafka", "stack-kafka", "9092", ServiceCategory.INFRA),
            Service("Orders", "stack-orders", "8083", ServiceCategory.APP),
            Service("Products", "stack-products", "8082", ServiceCategory.APP),
        ]
    )


@pytest.fixture
def fake_runtime():
    return FakeRuntime()
