"""Unit tests for converter function references."""

from __future__ import annotations

from pathlib import Path

import pytest

from convert.function_loader import load_function
from core.errors import ConverterError


def test_load_function_from_relative_file(tmp_path: Path) -> None:
    """File references should resolve relative to the base directory."""
    (tmp_path / "converters.py").write_text(
        "def shout(data, url):\n    return str(data).upper()\n",
        encoding="utf-8",
    )

    function = load_function("converters.py:shout", tmp_path)

    assert function("hi", "u") == "HI"


def test_load_function_from_module() -> None:
    """Dotted module references should import installed modules."""
    function = load_function("json:dumps", Path.cwd())

    assert function([1]) == "[1]"


def test_load_function_rejects_missing_attribute(tmp_path: Path) -> None:
    """References to missing attributes should fail clearly."""
    (tmp_path / "converters.py").write_text("VALUE = 1\n", encoding="utf-8")

    with pytest.raises(ConverterError):
        load_function("converters.py:VALUE", tmp_path)


def test_load_function_rejects_malformed_reference(tmp_path: Path) -> None:
    """References without an attribute separator are invalid."""
    with pytest.raises(ConverterError):
        load_function("converters.py", tmp_path)


def test_load_function_rejects_missing_file(tmp_path: Path) -> None:
    """Missing module files should fail clearly."""
    with pytest.raises(ConverterError):
        load_function("missing.py:fn", tmp_path)
