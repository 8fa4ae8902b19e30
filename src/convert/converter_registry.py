"""Converter registry and conversion planner.

This module owns registered converters, computes which mime types are
reachable from a seed set, and produces conversion chains lazily as an
async iterator so callers can publish each step as it arrives.
"""

from __future__ import annotations

import asyncio
import heapq
import inspect
import threading
from collections import deque
from dataclasses import dataclass
from typing import AsyncIterator, Iterable, Protocol

from convert.converters import ConversionEdge, Converter
from core.logging_config import get_logger
from core.types import Dataset
from store.registration import Registration

_LOGGER = get_logger(__name__)


class ConverterGraph(Protocol):
    """Operations the registry facade requires from a converter graph."""

    def list_target_mime_types(self, url: str, seed_mime_types: Iterable[str]) -> set[str]:
        """Return the reachability closure of the seed mime types."""
        ...

    def convert(self, datasets: Iterable[Dataset], target_mime_type: str) -> AsyncIterator[Dataset]:
        """Yield the conversion chain toward ``target_mime_type``."""
        ...


@dataclass(frozen=True)
class ConversionPath:
    """Planned conversion chain.

    Attributes:
        source_mime_type: Mime type the chain starts from.
        edges: Ordered converter applications; empty when no step is needed.
    """

    source_mime_type: str
    edges: tuple[ConversionEdge, ...]

    @property
    def cost(self) -> int:
        """Return the summed edge cost."""
        return sum(edge.cost for edge in self.edges)


class ConverterRegistry:
    """Mutable set of converters with graph search over mime types."""

    def __init__(self, converters: Iterable[Converter] = ()) -> None:
        """Create a registry.

        Args:
            converters: Converters registered up front.
        """
        self._lock = threading.Lock()
        self._converters: list[Converter] = []
        for converter in converters:
            self.register(converter)

    def register(self, converter: Converter) -> Registration:
        """Register a converter.

        Args:
            converter: Converter to add.

        Returns:
            Handle unregistering the converter on dispose.
        """
        with self._lock:
            self._converters.append(converter)
        _LOGGER.info("converter_registered", converter=converter.name)
        return Registration(lambda: self._unregister(converter))

    def converters(self) -> tuple[Converter, ...]:
        """Return registered converters in registration order."""
        with self._lock:
            return tuple(self._converters)

    def list_target_mime_types(self, url: str, seed_mime_types: Iterable[str]) -> set[str]:
        """Return every mime type reachable from the seeds, seeds included.

        Args:
            url: Locator passed to URL-aware converters.
            seed_mime_types: Mime types already available.

        Returns:
            Reachability closure as a set.
        """
        converters = self.converters()
        reachable = set(seed_mime_types)
        pending = deque(reachable)
        while pending:
            mime_type = pending.popleft()
            for edge in _edges_from(converters, mime_type, url):
                if edge.target_mime_type not in reachable:
                    reachable.add(edge.target_mime_type)
                    pending.append(edge.target_mime_type)
        return reachable

    def find_path(
        self,
        url: str,
        source_mime_types: Iterable[str],
        target_mime_type: str,
    ) -> ConversionPath | None:
        """Plan the cheapest conversion chain to a target mime type.

        Args:
            url: Locator passed to URL-aware converters.
            source_mime_types: Mime types the chain may start from.
            target_mime_type: Requested mime type.

        Returns:
            Lowest-cost path, ties broken by registration order, or None
            when the target is unreachable.
        """
        converters = self.converters()
        sources = list(dict.fromkeys(source_mime_types))
        if target_mime_type in sources:
            return ConversionPath(source_mime_type=target_mime_type, edges=())
        best_cost: dict[str, int] = {}
        came_from: dict[str, tuple[str, ConversionEdge] | None] = {}
        frontier: list[tuple[int, int, str]] = []
        counter = 0
        for mime_type in sources:
            best_cost[mime_type] = 0
            came_from[mime_type] = None
            heapq.heappush(frontier, (0, counter, mime_type))
            counter += 1
        while frontier:
            cost, _, mime_type = heapq.heappop(frontier)
            if cost > best_cost[mime_type]:
                continue
            if mime_type == target_mime_type:
                return _rebuild_path(came_from, target_mime_type)
            for edge in _edges_from(converters, mime_type, url):
                next_cost = cost + edge.cost
                known_cost = best_cost.get(edge.target_mime_type)
                if known_cost is not None and known_cost <= next_cost:
                    continue
                best_cost[edge.target_mime_type] = next_cost
                came_from[edge.target_mime_type] = (mime_type, edge)
                heapq.heappush(frontier, (next_cost, counter, edge.target_mime_type))
                counter += 1
        return None

    async def convert(
        self,
        datasets: Iterable[Dataset],
        target_mime_type: str,
    ) -> AsyncIterator[Dataset]:
        """Yield datasets along the cheapest chain to a target mime type.

        A source dataset that already has the target mime type is yielded
        alone. Nothing is yielded when the target is unreachable.

        Args:
            datasets: Datasets already available for one URL.
            target_mime_type: Requested mime type.

        Yields:
            Each converted dataset in chain order.
        """
        sources: dict[str, Dataset] = {}
        for dataset in datasets:
            sources.setdefault(dataset.mime_type, dataset)
        if target_mime_type in sources:
            yield sources[target_mime_type]
            return
        if not sources:
            _LOGGER.info("conversion_without_sources", target_mime_type=target_mime_type)
            return
        url = next(iter(sources.values())).url
        path = self.find_path(url, sources.keys(), target_mime_type)
        if path is None:
            _LOGGER.info(
                "conversion_unreachable",
                url=url,
                source_mime_types=sorted(sources),
                target_mime_type=target_mime_type,
            )
            return
        current = sources[path.source_mime_type]
        for step_index, edge in enumerate(path.edges, 1):
            await asyncio.sleep(0)
            data = edge.convert(current.data, current.url)
            if inspect.isawaitable(data):
                data = await data
            _LOGGER.info(
                "conversion_step",
                url=url,
                step=step_index,
                converter=edge.converter_name,
                source_mime_type=current.mime_type,
                target_mime_type=edge.target_mime_type,
            )
            current = Dataset(url=current.url, mime_type=edge.target_mime_type, data=data)
            yield current

    def _unregister(self, converter: Converter) -> None:
        with self._lock:
            if converter in self._converters:
                self._converters.remove(converter)
        _LOGGER.info("converter_unregistered", converter=converter.name)


def _edges_from(
    converters: Iterable[Converter],
    mime_type: str,
    url: str,
) -> Iterable[ConversionEdge]:
    """Return every edge offered from one mime type in registration order."""
    for converter in converters:
        yield from converter.edges(mime_type, url)


def _rebuild_path(
    came_from: dict[str, tuple[str, ConversionEdge] | None],
    target_mime_type: str,
) -> ConversionPath:
    """Walk predecessor links back from the target to a source."""
    edges: list[ConversionEdge] = []
    mime_type = target_mime_type
    step = came_from[mime_type]
    while step is not None:
        mime_type, edge = step
        edges.append(edge)
        step = came_from[mime_type]
    edges.reverse()
    return ConversionPath(source_mime_type=mime_type, edges=tuple(edges))
