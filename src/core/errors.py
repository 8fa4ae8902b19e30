"""Data registry exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class DataRegistryError(Exception):
    """Base exception for all data registry failures."""


class DataRegistryConfigError(DataRegistryError):
    """Raised for invalid runtime configuration."""


class RegistrySpecError(DataRegistryError):
    """Raised for invalid or unsupported registry spec files."""


class ResolverError(DataRegistryError):
    """Raised when a URL cannot be resolved into a dataset."""


class ConverterError(DataRegistryError):
    """Raised for invalid converter declarations."""


class UnreachableTargetError(DataRegistryError):
    """Raised when no conversion chain reaches a requested mime type."""

    def __init__(self, url: str, target_mime_type: str) -> None:
        super().__init__(
            f"No conversion chain reaches '{target_mime_type}' from the mime types "
            f"registered for {url}. Register the URL or a converter that produces it."
        )
        self.url = url
        self.target_mime_type = target_mime_type
