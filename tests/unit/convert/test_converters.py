"""Unit tests for converter definitions."""

from __future__ import annotations

import pytest

from convert.converters import create_converter, create_viewer_converter
from core.errors import ConverterError
from resolve.viewers import create_viewer_mime_type


def test_static_converter_offers_edge_only_for_source() -> None:
    """Static converters should only offer edges from their source type."""
    converter = create_converter("text/csv", "application/json", lambda data, url: data)

    assert [edge.target_mime_type for edge in converter.edges("text/csv", "u")] == [
        "application/json"
    ]
    assert list(converter.edges("text/plain", "u")) == []


def test_static_converter_rejects_non_positive_cost() -> None:
    """Converter costs must be positive integers."""
    with pytest.raises(ConverterError):
        create_converter("text/csv", "application/json", lambda data, url: data, cost=0)


def test_static_converter_rejects_empty_mime_type() -> None:
    """Converter mime types must be non-empty."""
    with pytest.raises(ConverterError):
        create_converter("", "application/json", lambda data, url: data)


def test_viewer_converter_wraps_view_function_in_thunk() -> None:
    """Viewer converters should defer the view action until the payload is called."""
    seen: list[tuple[object, str]] = []
    converter = create_viewer_converter(
        "application/json",
        "Table",
        lambda data, url: seen.append((data, url)),
    )
    (edge,) = converter.edges("application/json", "csv://data/a")

    thunk = edge.convert({"rows": 1}, "csv://data/a")

    assert seen == []
    thunk()
    assert seen == [({"rows": 1}, "csv://data/a")]
    assert edge.target_mime_type == create_viewer_mime_type("Table")
