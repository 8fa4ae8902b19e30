"""Typed registry spec parsing.

This module loads and validates YAML registry spec files declaring
resolver rules, converters, viewers, and URLs to register at startup.
One strict schema keeps CLI and SDK construction paths consistent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.constants import DEFAULT_CONVERTER_COST, REGISTRY_SPEC_VERSION
from core.errors import RegistrySpecError

_ROOT_KEYS = frozenset({"version", "resolver", "converters", "viewers", "urls"})
_RESOLVER_KEYS = frozenset({"schemes", "extensions"})
_CONVERTER_KEYS = frozenset({"from", "to", "function", "cost", "name"})
_VIEWER_KEYS = frozenset({"from", "label", "function"})


@dataclass(frozen=True)
class ResolverSpec:
    """URL resolver rules from a registry spec."""

    schemes: Mapping[str, str] = field(default_factory=dict)
    extensions: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ConverterSpec:
    """One converter declaration.

    Attributes:
        source_mime_type: Mime type accepted.
        target_mime_type: Mime type produced.
        function: ``file.py:attr`` or ``package.module:attr`` reference.
        cost: Positive edge weight.
        name: Optional display name.
    """

    source_mime_type: str
    target_mime_type: str
    function: str
    cost: int = DEFAULT_CONVERTER_COST
    name: str | None = None


@dataclass(frozen=True)
class ViewerSpec:
    """One viewer declaration."""

    source_mime_type: str
    label: str
    function: str


@dataclass(frozen=True)
class RegistrySpec:
    """Validated registry spec root object.

    Attributes:
        version: Schema version.
        base_dir: Directory relative function file references resolve against.
        resolver: Resolver rules.
        converters: Converter declarations in file order.
        viewers: Viewer declarations in file order.
        urls: URLs to register after wiring.
    """

    version: int
    base_dir: Path
    resolver: ResolverSpec
    converters: tuple[ConverterSpec, ...]
    viewers: tuple[ViewerSpec, ...]
    urls: tuple[str, ...]


def load_registry_spec(spec_path: str | Path) -> RegistrySpec:
    """Load and validate a YAML registry spec from disk.

    Args:
        spec_path: File path to the YAML registry spec.

    Returns:
        Fully validated registry spec.

    Raises:
        RegistrySpecError: If the file is missing, invalid, or fails schema checks.
    """
    spec_file = Path(spec_path).expanduser().resolve()
    payload = _load_yaml_payload(spec_file)
    root_mapping = _expect_mapping(payload, "registry spec root")
    _validate_keys(root_mapping, _ROOT_KEYS, "registry spec root")
    return RegistrySpec(
        version=_parse_version(root_mapping),
        base_dir=spec_file.parent,
        resolver=_parse_resolver(root_mapping.get("resolver")),
        converters=tuple(
            _parse_converter(item, index)
            for index, item in enumerate(_optional_sequence(root_mapping, "converters"))
        ),
        viewers=tuple(
            _parse_viewer(item, index)
            for index, item in enumerate(_optional_sequence(root_mapping, "viewers"))
        ),
        urls=tuple(
            _expect_string(item, f"registry spec url #{index + 1}")
            for index, item in enumerate(_optional_sequence(root_mapping, "urls"))
        ),
    )


def _load_yaml_payload(spec_file: Path) -> object:
    if not spec_file.exists():
        raise RegistrySpecError(
            f"Registry spec file does not exist at {spec_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(spec_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise RegistrySpecError(
            f"Failed to read registry spec at {spec_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise RegistrySpecError(
            f"Failed to parse YAML registry spec at {spec_file}: {error}. Fix YAML syntax."
        ) from error
    if payload is None:
        raise RegistrySpecError(f"Registry spec at {spec_file} is empty. Define at least 'version'.")
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise RegistrySpecError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise RegistrySpecError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_string(value: object, context: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise RegistrySpecError(f"Invalid {context}: expected non-empty string, got {value!r}.")


def _optional_sequence(mapping: Mapping[str, object], key: str) -> Sequence[object]:
    value = mapping.get(key)
    if value is None:
        return ()
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise RegistrySpecError(
        f"Registry spec field '{key}' must be a list, got {type(value).__name__}."
    )


def _validate_keys(mapping: Mapping[str, object], allowed: frozenset[str], context: str) -> None:
    unknown_keys = sorted(set(mapping) - allowed)
    if unknown_keys:
        raise RegistrySpecError(
            f"Unknown keys in {context}: {', '.join(unknown_keys)}. "
            f"Supported keys: {', '.join(sorted(allowed))}."
        )


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if isinstance(raw_version, bool) or not isinstance(raw_version, int):
        raise RegistrySpecError(
            f"Registry spec field 'version' must be an integer. Set version: {REGISTRY_SPEC_VERSION}."
        )
    if raw_version != REGISTRY_SPEC_VERSION:
        raise RegistrySpecError(
            f"Unsupported registry spec version {raw_version}. Use version: {REGISTRY_SPEC_VERSION}."
        )
    return raw_version


def _parse_resolver(raw_resolver: object) -> ResolverSpec:
    if raw_resolver is None:
        return ResolverSpec()
    resolver_mapping = _expect_mapping(raw_resolver, "registry spec resolver")
    _validate_keys(resolver_mapping, _RESOLVER_KEYS, "registry spec resolver")
    return ResolverSpec(
        schemes=_parse_string_table(resolver_mapping.get("schemes"), "resolver schemes"),
        extensions=_parse_string_table(resolver_mapping.get("extensions"), "resolver extensions"),
    )


def _parse_string_table(raw_table: object, context: str) -> Mapping[str, str]:
    if raw_table is None:
        return {}
    table = _expect_mapping(raw_table, context)
    return {key: _expect_string(value, f"{context} entry '{key}'") for key, value in table.items()}


def _parse_converter(value: object, index: int) -> ConverterSpec:
    context = f"registry spec converter #{index + 1}"
    mapping = _expect_mapping(value, context)
    _validate_keys(mapping, _CONVERTER_KEYS, context)
    raw_cost = mapping.get("cost", DEFAULT_CONVERTER_COST)
    if isinstance(raw_cost, bool) or not isinstance(raw_cost, int) or raw_cost <= 0:
        raise RegistrySpecError(f"Invalid {context}: 'cost' must be a positive integer.")
    raw_name = mapping.get("name")
    return ConverterSpec(
        source_mime_type=_expect_string(mapping.get("from"), f"{context} 'from'"),
        target_mime_type=_expect_string(mapping.get("to"), f"{context} 'to'"),
        function=_expect_string(mapping.get("function"), f"{context} 'function'"),
        cost=raw_cost,
        name=None if raw_name is None else _expect_string(raw_name, f"{context} 'name'"),
    )


def _parse_viewer(value: object, index: int) -> ViewerSpec:
    context = f"registry spec viewer #{index + 1}"
    mapping = _expect_mapping(value, context)
    _validate_keys(mapping, _VIEWER_KEYS, context)
    return ViewerSpec(
        source_mime_type=_expect_string(mapping.get("from"), f"{context} 'from'"),
        label=_expect_string(mapping.get("label"), f"{context} 'label'"),
        function=_expect_string(mapping.get("function"), f"{context} 'function'"),
    )
