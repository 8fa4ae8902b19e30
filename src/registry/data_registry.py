"""Data registry facade.

This module composes a dataset store, a converter graph, and a URL
resolver to register URLs, answer reachability queries, and run
conversions that publish every intermediate dataset as it is produced.
"""

from __future__ import annotations

import inspect
from typing import Protocol

from convert.converter_registry import ConverterGraph
from core.errors import ResolverError, UnreachableTargetError
from core.logging_config import get_logger
from core.types import Dataset
from resolve.viewers import create_viewer_mime_type, extract_viewer_label
from store.dataset_store import DatasetStore
from store.registration import Registration

_LOGGER = get_logger(__name__)


class Resolver(Protocol):
    """URL resolution operations the facade requires."""

    def resolve_dataset(self, url: str) -> Dataset:
        """Return the initial dataset for a URL."""
        ...

    def resolve_mime_type(self, url: str) -> str:
        """Return the initial mime type for a URL."""
        ...


class DataRegistry:
    """Registry composing converter and dataset registries."""

    def __init__(
        self,
        converters: ConverterGraph,
        data: DatasetStore,
        resolver: Resolver,
    ) -> None:
        """Create the facade.

        Args:
            converters: Converter graph used for reachability and conversion.
            data: Dataset store receiving registrations and conversions.
            resolver: URL resolver producing initial datasets.
        """
        self.converters = converters
        self.data = data
        self.resolver = resolver

    def register_url(self, url: str) -> Registration | None:
        """Publish the dataset a URL resolves to.

        Args:
            url: Dataset locator.

        Returns:
            Registration handle, or None when an equivalent dataset is
            already in the store.
        """
        dataset = self.resolver.resolve_dataset(url)
        if self.data.contains(dataset):
            _LOGGER.debug("url_already_registered", url=url, mime_type=dataset.mime_type)
            return None
        registration = self.data.publish(dataset)
        _LOGGER.info("url_registered", url=url, mime_type=dataset.mime_type)
        return registration

    def has_conversions(self, url: str) -> bool:
        """Return whether a URL, once registered, would have any conversions.

        Only the mime type sniffed from the URL seeds the search; whatever
        is already in the store is ignored. URLs the resolver rejects have
        no conversions.
        """
        try:
            seed = self.resolver.resolve_mime_type(url)
        except ResolverError:
            return False
        return len(self.converters.list_target_mime_types(url, {seed})) > 1

    def possible_mime_types_for_url(self, url: str) -> set[str]:
        """Return every mime type the registered data for a URL can become."""
        return self.converters.list_target_mime_types(url, self.data.mime_types_for_url(url))

    def viewers_for_url(self, url: str) -> set[str]:
        """Return the viewer labels reachable for a URL."""
        labels = (
            extract_viewer_label(mime_type)
            for mime_type in self.possible_mime_types_for_url(url)
        )
        return {label for label in labels if label is not None}

    async def view_url(self, url: str, label: str) -> None:
        """View a URL's data with the viewer named ``label``.

        Args:
            url: Dataset locator.
            label: Viewer label.

        Raises:
            UnreachableTargetError: If no chain reaches the viewer.
        """
        viewer = await self.convert_by_url(url, create_viewer_mime_type(label))
        result = viewer.data()
        if inspect.isawaitable(result):
            await result
        _LOGGER.info("url_viewed", url=url, label=label)

    async def convert_by_url(self, url: str, target_mime_type: str) -> Dataset:
        """Convert a URL's registered data to a target mime type.

        Every dataset the converter graph produces is published as soon as
        it arrives unless the store already contains it.

        Args:
            url: Dataset locator.
            target_mime_type: Requested mime type.

        Returns:
            Final dataset of the conversion chain.

        Raises:
            UnreachableTargetError: If the chain does not end at the target.
        """
        final_dataset: Dataset | None = None
        sources = self.data.filter_by_url(url)
        async for dataset in self.converters.convert(sources, target_mime_type):
            final_dataset = dataset
            if not self.data.contains(dataset):
                self.data.publish(dataset)
        if final_dataset is None or final_dataset.mime_type != target_mime_type:
            raise UnreachableTargetError(url, target_mime_type)
        return final_dataset
