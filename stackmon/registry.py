"""
Tracked service registry.

The registry is fixed for the lifetime of the process: it is built once at
startup (either the built-in list or a YAML file) and passed explicitly to
the collector and the renderer.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from stackmon.exceptions import RegistryError

logger = logging.getLogger(__name__)


class ServiceCategory(Enum):
    """Dashboard section a service is listed under."""

    INFRA = "infra"
    APP = "app"

    @property
    def title(self) -> str:
        return {
            ServiceCategory.INFRA: "🏗️  INFRASTRUCTURE",
            ServiceCategory.APP: "🚀 MICROSERVICES",
        }[self]


@dataclass(frozen=True)
class Service:
    """A container the dashboard expects to find."""

    name: str
    container_id: str
    port: str
    category: ServiceCategory


class ServiceRegistry:
    """
    Ordered, immutable collection of tracked services.

    Container identifiers are matched against live container names by
    substring. Duplicate or empty identifiers are rejected; identifiers that
    contain one another (``kafka`` / ``kafka-ui``) are allowed but reported
    by :meth:`overlapping_ids`, since a service can then match a container
    that belongs to another one.
    """

    def __init__(self, services: Iterable[Service]):
        self._services: tuple[Service, ...] = tuple(services)
        self._validate()

    def _validate(self) -> None:
        seen: set[str] = set()
        for service in self._services:
            if not service.container_id:
                raise RegistryError(f"Service {service.name!r} has an empty container id")
            if service.container_id in seen:
                raise RegistryError(f"Duplicate container id: {service.container_id!r}")
            seen.add(service.container_id)

    def overlapping_ids(self) -> list[tuple[str, str]]:
        """Pairs (short, long) where ``short`` is a substring of ``long``."""
        return [
            (service.container_id, other.container_id)
            for service in self._services
            for other in self._services
            if other is not service and service.container_id in other.container_id
        ]

    def __iter__(self) -> Iterator[Service]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)

    def __getitem__(self, index: int) -> Service:
        return self._services[index]

    def container_ids(self) -> list[str]:
        return [service.container_id for service in self._services]

    def by_category(self, category: ServiceCategory) -> list[Service]:
        """Services of one category, in registry order."""
        return [service for service in self._services if service.category is category]


DEFAULT_SERVICES = ServiceRegistry(
    [
        Service("MongoDB", "ms-kotlin-mongodb", "27018", ServiceCategory.INFRA),
        Service("MySQL", "ms-kotlin-mysql", "3307", ServiceCategory.INFRA),
        Service("Zookeeper", "ms-kotlin-zookeeper", "2181", ServiceCategory.INFRA),
        Service("Kafka", "ms-kotlin-kafka", "9092", ServiceCategory.INFRA),
        Service("Kafka-UI", "ms-kotlin-kafka-ui", "8090", ServiceCategory.INFRA),
        Service("Vault", "ms-kotlin-vault", "8200", ServiceCategory.INFRA),
        Service("Config", "ms-kotlin-configuration-server", "8888", ServiceCategory.APP),
        Service("Discovery", "ms-kotlin-discover-server", "8761", ServiceCategory.APP),
        Service("Products", "ms-kotlin-product-service", "8082", ServiceCategory.APP),
        Service("Orders", "ms-kotlin-order-service", "8083", ServiceCategory.APP),
    ]
)


class ServiceEntry(BaseModel):
    """One entry of a services YAML file."""

    name: str = Field(..., min_length=1)
    container: str = Field(..., min_length=1)
    port: str | int = ""
    type: Literal["infra", "app"] = "app"

    def to_service(self) -> Service:
        return Service(
            name=self.name,
            container_id=self.container,
            port=str(self.port),
            category=ServiceCategory(self.type),
        )


def load_registry(path: str | Path) -> ServiceRegistry:
    """
    Load a registry from a YAML file.

    The file holds either a list of entries or a mapping with a
    ``services`` key::

        services:
          - name: MongoDB
            container: ms-kotlin-mongodb
            port: 27018
            type: infra

    Raises:
        RegistryError: If the file is missing, unparsable or invalid
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise RegistryError(f"Cannot read services file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise RegistryError(f"Invalid YAML in {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("services")
    if not isinstance(data, list) or not data:
        raise RegistryError(f"{path} must contain a non-empty list of services")

    try:
        entries = [ServiceEntry.model_validate(item) for item in data]
    except ValidationError as exc:
        raise RegistryError(f"Invalid service entry in {path}: {exc}") from exc

    registry = ServiceRegistry(entry.to_service() for entry in entries)
    logger.info("Loaded %d services from %s", len(registry), path)
    for short, long in registry.overlapping_ids():
        logger.warning("Container id %r also matches containers named %r", short, long)
    return registry
