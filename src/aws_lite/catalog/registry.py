"""Operation catalog: service definitions indexed for lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from aws_lite.catalog.models import ServiceModel
from aws_lite.domain.operations import OperationRef
from aws_lite.errors import UnknownOperation


@dataclass
class OperationEntry:
    ref: OperationRef
    service: ServiceModel
    descriptor: Any


def _normalize(name: str) -> str:
    return name.lower().replace("-", "").replace("_", "")


class ServiceCatalog:
    def __init__(self) -> None:
        self._services: dict[str, ServiceModel] = {}
        self._operations: dict[str, OperationEntry] = {}

    def register(self, service: ServiceModel, descriptors: dict[str, Any]) -> None:
        # Later registrations replace earlier ones, so user catalogs override bundled data
        self._services[service.service] = service
        stale = [
            key
            for key, entry in self._operations.items()
            if entry.service.service == service.service
        ]
        for key in stale:
            del self._operations[key]
        for name, descriptor in descriptors.items():
            ref = OperationRef(service=service.service, operation=name)
            self._operations[ref.key] = OperationEntry(
                ref=ref,
                service=service,
                descriptor=descriptor,
            )

    def list_services(self) -> list[ServiceModel]:
        return list(self._services.values())

    def list_operations(self) -> Iterable[OperationEntry]:
        return self._operations.values()

    def find_service(self, service: str) -> ServiceModel | None:
        if service in self._services:
            return self._services[service]
        target = _normalize(service)
        for model in self._services.values():
            if _normalize(model.service) == target or _normalize(model.signing_name) == target:
                return model
        return None

    def find_operation(self, service: str, operation: str) -> OperationEntry:
        # Try exact match first
        key = OperationRef(service=service, operation=operation).key
        if key in self._operations:
            return self._operations[key]

        # Then case-insensitive / snake-case match on both names
        model = self.find_service(service)
        if model is not None:
            target_op = _normalize(operation)
            for entry in self._operations.values():
                if entry.service is model and _normalize(entry.ref.operation) == target_op:
                    return entry
        raise UnknownOperation(f"Unknown operation: {service}.{operation}")
