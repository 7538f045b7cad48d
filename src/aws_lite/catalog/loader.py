"""Catalog loader for service definition YAML files."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable
from pathlib import Path

import yaml
from pydantic import ValidationError

from aws_lite.catalog.descriptor import DeclarativeDescriptor, Hooks
from aws_lite.catalog.models import ServiceModel
from aws_lite.catalog.registry import ServiceCatalog
from aws_lite.errors import CatalogError

_logger = logging.getLogger(__name__)

BUNDLED_DATA_PATH = Path(__file__).resolve().parent / "data"


def load_service(path: Path) -> ServiceModel:
    if not path.exists():
        raise FileNotFoundError(f"Service definition not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise CatalogError(f"Invalid YAML in {path}: {exc}") from exc
    try:
        return ServiceModel.from_yaml(data)
    except ValidationError as exc:
        raise CatalogError(f"Invalid service definition in {path}: {exc}") from exc


def resolve_hooks(reference: str) -> Hooks:
    """Import ``package.module:attribute`` and return it as hooks."""
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise CatalogError(f"Hooks reference must look like 'module:attribute': {reference!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise CatalogError(f"Cannot import hooks module {module_name!r}: {exc}") from exc
    hooks = getattr(module, attr, None)
    if hooks is None:
        raise CatalogError(f"Hooks {attr!r} not found in {module_name!r}")
    if isinstance(hooks, Hooks):
        return hooks
    return Hooks(request=getattr(hooks, "request", None), response=getattr(hooks, "response", None))


def build_descriptors(service: ServiceModel) -> dict[str, DeclarativeDescriptor]:
    descriptors = {}
    for name, model in service.operations.items():
        hooks = resolve_hooks(model.hooks) if model.hooks else None
        descriptors[name] = DeclarativeDescriptor(service, name, model, hooks)
    return descriptors


def load_catalog(extra_paths: Iterable[str] = (), include_bundled: bool = True) -> ServiceCatalog:
    catalog = ServiceCatalog()
    paths: list[Path] = [BUNDLED_DATA_PATH] if include_bundled else []
    paths.extend(Path(p) for p in extra_paths)
    for file_path in _iter_yaml_files(paths):
        service = load_service(file_path)
        catalog.register(service, build_descriptors(service))
        _logger.debug(
            "Loaded %s (%d operations) from %s",
            service.service,
            len(service.operations),
            file_path,
        )
    return catalog


def _iter_yaml_files(paths: list[Path]) -> list[Path]:
    files: list[Path] = []
    for path in paths:
        if path.is_file() and path.suffix in {".yaml", ".yml"}:
            files.append(path)
        elif path.is_dir():
            files.extend(sorted([*path.glob("*.yaml"), *path.glob("*.yml")]))
        else:
            raise FileNotFoundError(f"Catalog path not found: {path}")
    return files
