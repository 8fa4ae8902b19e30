"""Public SDK surface for the data registry.

This module provides a stable import path for hosting applications.
It re-exports the facade, its collaborators, and typed models.
"""

from __future__ import annotations

from convert.converter_registry import ConversionPath, ConverterGraph, ConverterRegistry
from convert.converters import (
    ConversionEdge,
    Converter,
    StaticConverter,
    create_converter,
    create_viewer_converter,
)
from core.config import DataRegistryConfig
from core.errors import DataRegistryError, UnreachableTargetError
from core.registry_spec import RegistrySpec, load_registry_spec
from core.types import Dataset, DatasetChange
from registry.data_registry import DataRegistry
from registry.factory import build_data_registry
from resolve.url_resolver import URLResolver
from resolve.viewers import create_viewer_mime_type, extract_viewer_label
from store.dataset_store import DatasetStore, InMemoryDatasetStore
from store.registration import Registration

__all__ = [
    "ConversionEdge",
    "ConversionPath",
    "Converter",
    "ConverterGraph",
    "ConverterRegistry",
    "DataRegistry",
    "DataRegistryConfig",
    "DataRegistryError",
    "Dataset",
    "DatasetChange",
    "DatasetStore",
    "InMemoryDatasetStore",
    "Registration",
    "RegistrySpec",
    "StaticConverter",
    "URLResolver",
    "UnreachableTargetError",
    "build_data_registry",
    "create_converter",
    "create_viewer_converter",
    "create_viewer_mime_type",
    "extract_viewer_label",
    "load_registry_spec",
]
