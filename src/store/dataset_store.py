"""Dataset store contract and in-memory implementation.

This module owns dataset identity and publication. The registry facade
only talks to stores through the ``DatasetStore`` protocol, so tests and
hosting applications can swap in their own backends.
"""

from __future__ import annotations

import threading
from typing import Callable, Iterable, Protocol

from core.logging_config import get_logger
from core.types import Dataset, DatasetChange, DatasetChangeKind
from store.registration import Registration, inert_registration

_LOGGER = get_logger(__name__)

DatasetKey = tuple[str, str]
DatasetListener = Callable[[DatasetChange], None]


class DatasetStore(Protocol):
    """Operations the registry facade requires from a dataset store."""

    def contains(self, dataset: Dataset) -> bool:
        """Return whether an equivalent dataset is already published."""
        ...

    def publish(self, dataset: Dataset) -> Registration:
        """Publish a dataset and return its releasable handle."""
        ...

    def filter_by_url(self, url: str) -> tuple[Dataset, ...]:
        """Return datasets currently published for a URL."""
        ...

    def mime_types_for_url(self, url: str) -> set[str]:
        """Return mime types currently published for a URL."""
        ...


class InMemoryDatasetStore:
    """Process-local dataset store keyed by URL and mime type.

    Two datasets are the same entity when they share both URL and mime
    type, whatever their payloads. Publication order is preserved per URL.
    """

    def __init__(self, datasets: Iterable[Dataset] = ()) -> None:
        """Create a store, optionally pre-populated.

        Args:
            datasets: Initial datasets to publish.
        """
        self._lock = threading.RLock()
        self._datasets: dict[DatasetKey, Dataset] = {}
        self._listeners: list[DatasetListener] = []
        for dataset in datasets:
            self.publish(dataset)

    def __len__(self) -> int:
        with self._lock:
            return len(self._datasets)

    def contains(self, dataset: Dataset) -> bool:
        """Return whether a dataset with the same identity is published.

        Args:
            dataset: Dataset to look up.

        Returns:
            True when URL and mime type are already registered.
        """
        with self._lock:
            return _dataset_key(dataset) in self._datasets

    def publish(self, dataset: Dataset) -> Registration:
        """Publish a dataset.

        Args:
            dataset: Dataset to register.

        Returns:
            Handle removing this dataset on dispose. Publishing an identity
            that is already present returns an inert handle.
        """
        key = _dataset_key(dataset)
        with self._lock:
            if key in self._datasets:
                _LOGGER.debug("dataset_already_published", url=dataset.url, mime_type=dataset.mime_type)
                return inert_registration()
            self._datasets[key] = dataset
        _LOGGER.info("dataset_published", url=dataset.url, mime_type=dataset.mime_type)
        self._notify("published", dataset)
        return Registration(lambda: self._remove_exact(dataset))

    def remove(self, dataset: Dataset) -> bool:
        """Remove the dataset sharing this dataset's identity.

        Args:
            dataset: Dataset to remove.

        Returns:
            True when a dataset was removed.
        """
        with self._lock:
            removed = self._datasets.pop(_dataset_key(dataset), None)
        if removed is None:
            return False
        _LOGGER.info("dataset_removed", url=removed.url, mime_type=removed.mime_type)
        self._notify("removed", removed)
        return True

    def filter_by_url(self, url: str) -> tuple[Dataset, ...]:
        """Return datasets published for a URL in publication order.

        Args:
            url: Dataset locator.

        Returns:
            Tuple of matching datasets, empty for unknown URLs.
        """
        with self._lock:
            return tuple(dataset for dataset in self._datasets.values() if dataset.url == url)

    def mime_types_for_url(self, url: str) -> set[str]:
        """Return mime types published for a URL.

        Args:
            url: Dataset locator.

        Returns:
            Set of mime types, empty for unknown URLs.
        """
        return {dataset.mime_type for dataset in self.filter_by_url(url)}

    def datasets(self) -> tuple[Dataset, ...]:
        """Return every published dataset in publication order."""
        with self._lock:
            return tuple(self._datasets.values())

    def subscribe(self, listener: DatasetListener) -> Registration:
        """Register a callback for publish and remove events.

        Args:
            listener: Callable receiving each ``DatasetChange``.

        Returns:
            Handle unsubscribing the listener on dispose.
        """
        with self._lock:
            self._listeners.append(listener)
        return Registration(lambda: self._unsubscribe(listener))

    def _remove_exact(self, dataset: Dataset) -> None:
        """Remove a dataset only if this exact instance is still published."""
        key = _dataset_key(dataset)
        with self._lock:
            if self._datasets.get(key) is not dataset:
                return
            del self._datasets[key]
        _LOGGER.info("dataset_removed", url=dataset.url, mime_type=dataset.mime_type)
        self._notify("removed", dataset)

    def _unsubscribe(self, listener: DatasetListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self, kind: DatasetChangeKind, dataset: Dataset) -> None:
        with self._lock:
            listeners = tuple(self._listeners)
        change = DatasetChange(kind=kind, dataset=dataset)
        for listener in listeners:
            listener(change)


def _dataset_key(dataset: Dataset) -> DatasetKey:
    """Return the identity key of a dataset."""
    return (dataset.url, dataset.mime_type)
