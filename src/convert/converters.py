"""Converter definitions.

A converter inspects a mime type and URL and offers zero or more
conversion edges. Edges carry a cost so the registry can choose the
cheapest chain when several reach the same target.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Protocol

from core.constants import DEFAULT_CONVERTER_COST
from core.errors import ConverterError
from resolve.viewers import create_viewer_mime_type

ConvertFunction = Callable[[Any, str], Any]
ViewFunction = Callable[[Any, str], Awaitable[None] | None]


@dataclass(frozen=True)
class ConversionEdge:
    """One possible converter application.

    Attributes:
        target_mime_type: Mime type produced by ``convert``.
        convert: ``convert(data, url)`` returning the payload or an awaitable of it.
        cost: Positive weight used when choosing between chains.
        converter_name: Name of the converter offering this edge.
    """

    target_mime_type: str
    convert: ConvertFunction
    cost: int = DEFAULT_CONVERTER_COST
    converter_name: str = ""


class Converter(Protocol):
    """Capability the converter registry consumes."""

    name: str

    def edges(self, mime_type: str, url: str) -> Iterable[ConversionEdge]:
        """Return the edges available from ``mime_type`` for ``url``."""
        ...


class StaticConverter:
    """Converter with one fixed source and target mime type."""

    def __init__(
        self,
        source_mime_type: str,
        target_mime_type: str,
        fn: ConvertFunction,
        cost: int = DEFAULT_CONVERTER_COST,
        name: str | None = None,
    ) -> None:
        """Create a static converter.

        Args:
            source_mime_type: Mime type accepted.
            target_mime_type: Mime type produced.
            fn: ``fn(data, url)`` conversion callable.
            cost: Positive edge weight.
            name: Optional display name, derived from mime types when omitted.

        Raises:
            ConverterError: If the declaration is invalid.
        """
        _validate_mime_type(source_mime_type, "source")
        _validate_mime_type(target_mime_type, "target")
        if not callable(fn):
            raise ConverterError(
                f"Converter {source_mime_type} -> {target_mime_type} needs a callable, "
                f"got {type(fn).__name__}."
            )
        if isinstance(cost, bool) or not isinstance(cost, int) or cost <= 0:
            raise ConverterError(
                f"Converter {source_mime_type} -> {target_mime_type} has invalid cost {cost!r}. "
                "Use a positive integer."
            )
        self.source_mime_type = source_mime_type
        self.target_mime_type = target_mime_type
        self.name = name or f"{source_mime_type}->{target_mime_type}"
        self._edge = ConversionEdge(
            target_mime_type=target_mime_type,
            convert=fn,
            cost=cost,
            converter_name=self.name,
        )

    def edges(self, mime_type: str, url: str) -> Iterable[ConversionEdge]:
        if mime_type == self.source_mime_type:
            return (self._edge,)
        return ()

    def __repr__(self) -> str:
        return f"StaticConverter({self.name!r}, cost={self._edge.cost})"


def create_converter(
    source_mime_type: str,
    target_mime_type: str,
    fn: ConvertFunction,
    cost: int = DEFAULT_CONVERTER_COST,
    name: str | None = None,
) -> StaticConverter:
    """Build a converter between two fixed mime types."""
    return StaticConverter(source_mime_type, target_mime_type, fn, cost=cost, name=name)


def create_viewer_converter(
    source_mime_type: str,
    label: str,
    view_fn: ViewFunction,
    cost: int = DEFAULT_CONVERTER_COST,
) -> StaticConverter:
    """Build a converter exposing a viewer for a mime type.

    The produced dataset's payload is a zero-argument thunk; calling it
    runs ``view_fn(data, url)``.

    Args:
        source_mime_type: Mime type the viewer can display.
        label: Human-readable viewer label.
        view_fn: Display action, sync or async.
        cost: Positive edge weight.

    Returns:
        Converter targeting the viewer's pseudo mime type.
    """
    if not label:
        raise ConverterError("Viewer label must be a non-empty string.")

    def to_viewer(data: Any, url: str) -> Callable[[], Awaitable[None] | None]:
        return lambda: view_fn(data, url)

    return StaticConverter(
        source_mime_type,
        create_viewer_mime_type(label),
        to_viewer,
        cost=cost,
        name=f"viewer:{label}",
    )


def _validate_mime_type(mime_type: object, role: str) -> None:
    if not isinstance(mime_type, str) or not mime_type.strip():
        raise ConverterError(
            f"Converter {role} mime type must be a non-empty string, got {mime_type!r}."
        )
