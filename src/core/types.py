"""Shared typed models.

This module defines immutable data models used by the store, converter,
resolver, and registry layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

DatasetChangeKind = Literal["published", "removed"]


@dataclass(frozen=True)
class Dataset:
    """Addressable unit of data in one representation.

    Attributes:
        url: Locator shared by every representation of the same data.
        mime_type: Representation of ``data``.
        data: Payload; viewer datasets carry a zero-argument callable.
    """

    url: str
    mime_type: str
    data: Any = None


@dataclass(frozen=True)
class DatasetChange:
    """Notification emitted by a dataset store.

    Attributes:
        kind: Whether the dataset was published or removed.
        dataset: Affected dataset.
    """

    kind: DatasetChangeKind
    dataset: Dataset
