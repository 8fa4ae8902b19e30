"""Disposable registration handles.

A registration represents one revocable entry in a registry.
Disposing it runs the release action once; later calls are no-ops.
"""

from __future__ import annotations

import threading
from typing import Callable


class Registration:
    """Explicitly released handle for a published entry."""

    def __init__(self, release: Callable[[], None] | None = None) -> None:
        """Create a registration handle.

        Args:
            release: Action undoing the registration, or None for an inert handle.
        """
        self._release = release
        self._lock = threading.Lock()
        self._disposed = release is None

    @property
    def is_disposed(self) -> bool:
        """Return whether the registration has been released."""
        return self._disposed

    def dispose(self) -> None:
        """Release the registration.

        Safe to call any number of times.
        """
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            release = self._release
            self._release = None
        if release is not None:
            release()


def inert_registration() -> Registration:
    """Return a handle that owns nothing."""
    return Registration(None)
