"""Runtime configuration model for the data registry.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import FALLBACK_MIME_TYPE_ENV_VAR, RESOLVE_MIME_TYPE, SPEC_FILE_ENV_VAR
from core.errors import DataRegistryConfigError


@dataclass(frozen=True)
class DataRegistryConfig:
    """Validated runtime configuration.

    Attributes:
        spec_path: Optional YAML registry spec declaring converters and URLs.
        fallback_mime_type: Mime type assigned to URLs no resolver rule matches.
    """

    spec_path: Path | None
    fallback_mime_type: str = RESOLVE_MIME_TYPE

    @classmethod
    def from_env(cls) -> "DataRegistryConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            DataRegistryConfigError: If environment values are invalid.
        """
        spec_path_value = os.getenv(SPEC_FILE_ENV_VAR)
        fallback_value = os.getenv(FALLBACK_MIME_TYPE_ENV_VAR, RESOLVE_MIME_TYPE)
        return cls(
            spec_path=_parse_spec_path(spec_path_value),
            fallback_mime_type=_parse_mime_type(fallback_value),
        )


def _parse_spec_path(raw_value: str | None) -> Path | None:
    """Parse the optional registry spec path.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Resolved path or None when unset.
    """
    if raw_value is None or not raw_value.strip():
        return None
    return Path(raw_value.strip()).expanduser().resolve()


def _parse_mime_type(raw_value: str) -> str:
    """Validate the fallback mime type environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Stripped mime type.

    Raises:
        DataRegistryConfigError: If value is not of the form type/subtype.
    """
    value = raw_value.strip()
    major, _, minor = value.partition("/")
    if not major or not minor:
        raise DataRegistryConfigError(
            f"Invalid {FALLBACK_MIME_TYPE_ENV_VAR} value: "
            f"expected 'type/subtype', got '{raw_value}'. "
            f"Set {FALLBACK_MIME_TYPE_ENV_VAR} to a mime type such as text/plain."
        )
    return value
