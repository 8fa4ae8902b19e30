"""Converter function loader.

This module loads user-provided converter and viewer callables from
``file.py:attr`` or ``package.module:attr`` references.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
from pathlib import Path
from typing import Any, Callable, cast

from core.errors import ConverterError


def load_function(reference: str, base_dir: Path) -> Callable[..., Any]:
    """Load a callable from a reference string.

    Args:
        reference: ``path/to/file.py:attr`` or ``package.module:attr``.
        base_dir: Directory relative file paths resolve against.

    Returns:
        Referenced callable.

    Raises:
        ConverterError: If the reference is malformed or the target is missing.
    """
    module_ref, separator, attribute = reference.rpartition(":")
    if not separator or not module_ref or not attribute:
        raise ConverterError(
            f"Invalid function reference '{reference}': expected 'module:attr' or 'file.py:attr'."
        )
    if module_ref.endswith(".py"):
        module = _load_python_file(_resolve_file(module_ref, base_dir))
    else:
        module = _import_module(module_ref)
    function = getattr(module, attribute, None)
    if function is None or not callable(function):
        raise ConverterError(
            f"Invalid function reference '{reference}': missing callable '{attribute}'."
        )
    return cast(Callable[..., Any], function)


def _resolve_file(file_ref: str, base_dir: Path) -> Path:
    file_path = Path(file_ref).expanduser()
    if not file_path.is_absolute():
        file_path = base_dir / file_path
    resolved_path = file_path.resolve()
    if not resolved_path.exists():
        raise ConverterError(
            f"Converter module file not found at {resolved_path}. "
            "Paths are relative to the registry spec file."
        )
    return resolved_path


def _import_module(module_name: str) -> Any:
    try:
        return importlib.import_module(module_name)
    except ImportError as error:
        raise ConverterError(
            f"Failed to import converter module '{module_name}': {error}. "
            "Install the module or reference a .py file instead."
        ) from error


def _load_python_file(module_path: Path) -> Any:
    """Load Python module from file path."""
    digest = hashlib.sha256(str(module_path).encode("utf-8")).hexdigest()[:12]
    spec = importlib.util.spec_from_file_location(f"dataregistry_user_{digest}", str(module_path))
    if spec is None or spec.loader is None:
        raise ConverterError(
            f"Failed to load converter module at {module_path}. Verify the file path and syntax."
        )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
