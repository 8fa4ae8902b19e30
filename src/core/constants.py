"""Core constants used across data registry modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

RESOLVE_MIME_TYPE = "application/x.dataregistry.url"
VIEWER_MIME_TYPE = "application/x.dataregistry.viewer"
VIEWER_LABEL_PARAMETER = "label"
DATA_URL_SCHEME = "data"
DATA_URL_DEFAULT_MIME_TYPE = "text/plain"
DEFAULT_CONVERTER_COST = 1
REGISTRY_SPEC_VERSION = 1
SPEC_FILE_ENV_VAR = "DATAREGISTRY_SPEC_FILE"
FALLBACK_MIME_TYPE_ENV_VAR = "DATAREGISTRY_FALLBACK_MIME_TYPE"
