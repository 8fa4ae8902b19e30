"""Data registry construction from configuration.

This module wires the in-memory store, converter registry, and URL
resolver, applying the optional YAML registry spec on top.
"""

from __future__ import annotations

from convert.converter_registry import ConverterRegistry
from convert.converters import StaticConverter, create_converter, create_viewer_converter
from convert.function_loader import load_function
from core.config import DataRegistryConfig
from core.logging_config import get_logger
from core.registry_spec import RegistrySpec, load_registry_spec
from registry.data_registry import DataRegistry
from resolve.url_resolver import URLResolver
from store.dataset_store import InMemoryDatasetStore

_LOGGER = get_logger(__name__)


def build_data_registry(config: DataRegistryConfig | None = None) -> DataRegistry:
    """Build a registry from runtime configuration.

    Args:
        config: Optional runtime configuration, read from env when omitted.

    Returns:
        Wired registry with spec converters and URLs registered.

    Raises:
        RegistrySpecError: If the configured spec file is invalid.
        ConverterError: If a declared converter cannot be loaded.
    """
    resolved_config = config or DataRegistryConfig.from_env()
    if resolved_config.spec_path is None:
        return DataRegistry(
            converters=ConverterRegistry(),
            data=InMemoryDatasetStore(),
            resolver=URLResolver(fallback_mime_type=resolved_config.fallback_mime_type),
        )
    spec = load_registry_spec(resolved_config.spec_path)
    return build_data_registry_from_spec(spec, resolved_config.fallback_mime_type)


def build_data_registry_from_spec(spec: RegistrySpec, fallback_mime_type: str) -> DataRegistry:
    """Build a registry from a validated registry spec.

    Args:
        spec: Parsed registry spec.
        fallback_mime_type: Mime type for URLs no resolver rule matches.

    Returns:
        Wired registry with spec converters and URLs registered.
    """
    resolver = URLResolver(
        scheme_mime_types=spec.resolver.schemes,
        extension_mime_types=spec.resolver.extensions,
        fallback_mime_type=fallback_mime_type,
    )
    registry = DataRegistry(
        converters=ConverterRegistry(_build_converters(spec)),
        data=InMemoryDatasetStore(),
        resolver=resolver,
    )
    for url in spec.urls:
        registry.register_url(url)
    _LOGGER.info(
        "registry_spec_loaded",
        base_dir=str(spec.base_dir),
        converter_count=len(spec.converters),
        viewer_count=len(spec.viewers),
        url_count=len(spec.urls),
    )
    return registry


def _build_converters(spec: RegistrySpec) -> list[StaticConverter]:
    """Instantiate converters and viewers declared in a spec."""
    converters = [
        create_converter(
            item.source_mime_type,
            item.target_mime_type,
            load_function(item.function, spec.base_dir),
            cost=item.cost,
            name=item.name,
        )
        for item in spec.converters
    ]
    converters.extend(
        create_viewer_converter(
            item.source_mime_type,
            item.label,
            load_function(item.function, spec.base_dir),
        )
        for item in spec.viewers
    )
    return converters
