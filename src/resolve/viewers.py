"""Viewer label encoding.

Viewers are modeled as pseudo mime types so converters can target them
like any other representation. Labels are JSON-quoted, which keeps the
encoding reversible for every string.
"""

from __future__ import annotations

import json
import re

from core.constants import VIEWER_LABEL_PARAMETER, VIEWER_MIME_TYPE

_VIEWER_PATTERN = re.compile(
    rf'^{re.escape(VIEWER_MIME_TYPE)}; {VIEWER_LABEL_PARAMETER}=(".*")$',
    re.DOTALL,
)


def create_viewer_mime_type(label: str) -> str:
    """Encode a viewer label as a pseudo mime type.

    Args:
        label: Human-readable viewer label.

    Returns:
        Viewer mime type string.
    """
    return f"{VIEWER_MIME_TYPE}; {VIEWER_LABEL_PARAMETER}={json.dumps(label)}"


def extract_viewer_label(mime_type: str) -> str | None:
    """Decode the viewer label from a pseudo mime type.

    Args:
        mime_type: Any mime type string.

    Returns:
        The label, or None when ``mime_type`` is not a viewer mime type.
    """
    match = _VIEWER_PATTERN.match(mime_type)
    if match is None:
        return None
    try:
        label = json.loads(match.group(1))
    except json.JSONDecodeError:
        return None
    return label if isinstance(label, str) else None
