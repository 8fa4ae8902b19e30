"""URL to dataset resolution.

This module sniffs the initial mime type of a URL from its scheme or
path suffix. The resolved dataset carries the URL itself as payload;
converters registered for that mime type are responsible for loading.
"""

from __future__ import annotations

import mimetypes
from typing import Mapping
from urllib.parse import urlsplit

from core.constants import DATA_URL_DEFAULT_MIME_TYPE, DATA_URL_SCHEME, RESOLVE_MIME_TYPE
from core.errors import ResolverError
from core.types import Dataset


class URLResolver:
    """Deterministic URL to mime type resolver.

    Resolution order: ``data:`` media type, scheme table, extension table,
    the standard library default suffix table, then the fallback type.
    """

    def __init__(
        self,
        scheme_mime_types: Mapping[str, str] | None = None,
        extension_mime_types: Mapping[str, str] | None = None,
        fallback_mime_type: str = RESOLVE_MIME_TYPE,
    ) -> None:
        """Create a resolver.

        Args:
            scheme_mime_types: Mime type per URL scheme, e.g. ``{"csv": "text/csv"}``.
            extension_mime_types: Mime type per path suffix, e.g. ``{".tsv": ...}``.
            fallback_mime_type: Mime type for URLs no rule matches.
        """
        self._scheme_mime_types = {
            scheme.lower().rstrip(":"): mime_type
            for scheme, mime_type in (scheme_mime_types or {}).items()
        }
        self._extension_mime_types = {
            _normalize_extension(extension): mime_type
            for extension, mime_type in (extension_mime_types or {}).items()
        }
        self._fallback_mime_type = fallback_mime_type
        self._default_types = mimetypes.MimeTypes()

    def resolve_mime_type(self, url: str) -> str:
        """Return the initial mime type of a URL.

        Args:
            url: Dataset locator.

        Returns:
            Sniffed mime type, or the fallback type.

        Raises:
            ResolverError: If the URL is empty.
        """
        parsed = urlsplit(_require_url(url))
        scheme = parsed.scheme.lower()
        if scheme == DATA_URL_SCHEME and scheme not in self._scheme_mime_types:
            return _data_url_mime_type(parsed.path)
        if scheme in self._scheme_mime_types:
            return self._scheme_mime_types[scheme]
        suffix = _path_suffix(parsed.path)
        if suffix in self._extension_mime_types:
            return self._extension_mime_types[suffix]
        guessed, _ = self._default_types.guess_type(parsed.path or url, strict=False)
        return guessed or self._fallback_mime_type

    def resolve_dataset(self, url: str) -> Dataset:
        """Return the initial dataset for a URL.

        Args:
            url: Dataset locator.

        Returns:
            Dataset with the sniffed mime type and the stripped URL as both
            locator and payload.

        Raises:
            ResolverError: If the URL is empty.
        """
        normalized_url = _require_url(url)
        return Dataset(
            url=normalized_url,
            mime_type=self.resolve_mime_type(normalized_url),
            data=normalized_url,
        )


def _require_url(url: str) -> str:
    if not url or not url.strip():
        raise ResolverError("Cannot resolve an empty URL. Provide a non-empty dataset locator.")
    return url.strip()


def _data_url_mime_type(path: str) -> str:
    """Return the media type declared in a ``data:`` URL body."""
    header = path.split(",", 1)[0]
    media_type = header.split(";", 1)[0].strip().lower()
    if "/" not in media_type:
        return DATA_URL_DEFAULT_MIME_TYPE
    return media_type


def _path_suffix(path: str) -> str:
    last_segment = path.rsplit("/", 1)[-1]
    if "." not in last_segment:
        return ""
    return "." + last_segment.rsplit(".", 1)[-1].lower()


def _normalize_extension(extension: str) -> str:
    normalized = extension.strip().lower()
    return normalized if normalized.startswith(".") else f".{normalized}"
