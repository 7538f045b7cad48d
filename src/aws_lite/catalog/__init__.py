"""Service catalog: declarative operation descriptors loaded at startup."""

from __future__ import annotations

from aws_lite.catalog.descriptor import DeclarativeDescriptor, Hooks
from aws_lite.catalog.loader import load_catalog
from aws_lite.catalog.registry import OperationEntry, ServiceCatalog

__all__ = ["DeclarativeDescriptor", "Hooks", "OperationEntry", "ServiceCatalog", "load_catalog"]
