"""Data registry CLI entry points.
This module exposes registry queries and conversions as commands.
It maps argparse commands onto facade calls.
"""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import DataRegistryConfig
from core.errors import DataRegistryError
from registry.data_registry import DataRegistry
from registry.factory import build_data_registry


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="dataregistry", description="Data registry CLI")
    parser.add_argument("--spec", help="Override DATAREGISTRY_SPEC_FILE for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_url_command(subparsers, "register", "Register a URL and print its mime type")
    _add_url_command(subparsers, "has-conversions", "Check whether a URL has conversions")
    _add_url_command(subparsers, "mimetypes", "List mime types reachable for a URL")
    _add_url_command(subparsers, "viewers", "List viewer labels reachable for a URL")
    _add_convert_command(subparsers)
    _add_view_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the data registry CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        registry = _build_registry(args.spec)
        return _dispatch(registry, args)
    except DataRegistryError as error:
        print(f"error={error}")
        return 1


def _dispatch(registry: DataRegistry, args: argparse.Namespace) -> int:
    if args.command == "register":
        return _run_register_command(registry, args)
    if args.command == "has-conversions":
        print("true" if registry.has_conversions(args.url) else "false")
        return 0
    if args.command == "mimetypes":
        registry.register_url(args.url)
        for mime_type in sorted(registry.possible_mime_types_for_url(args.url)):
            print(mime_type)
        return 0
    if args.command == "viewers":
        registry.register_url(args.url)
        for label in sorted(registry.viewers_for_url(args.url)):
            print(label)
        return 0
    if args.command == "convert":
        return _run_convert_command(registry, args)
    if args.command == "view":
        registry.register_url(args.url)
        asyncio.run(registry.view_url(args.url, args.label))
        return 0
    raise DataRegistryError(f"Unsupported command: {args.command}")


def _build_registry(spec_path: str | None) -> DataRegistry:
    """Build registry with optional spec override.

    Args:
        spec_path: Optional override path.

    Returns:
        Configured registry.
    """
    config = DataRegistryConfig.from_env()
    if spec_path:
        config = replace(config, spec_path=Path(spec_path).expanduser().resolve())
    return build_data_registry(config)


def _run_register_command(registry: DataRegistry, args: argparse.Namespace) -> int:
    """Handle register command.

    Args:
        registry: Registry facade.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    registration = registry.register_url(args.url)
    print(f"mime_type={registry.resolver.resolve_mime_type(args.url)}")
    print(f"registered={'false' if registration is None else 'true'}")
    return 0


def _run_convert_command(registry: DataRegistry, args: argparse.Namespace) -> int:
    """Handle convert command.

    Args:
        registry: Registry facade.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    registry.register_url(args.url)
    dataset = asyncio.run(registry.convert_by_url(args.url, args.target))
    print(f"mime_type={dataset.mime_type}")
    print(f"data={_render_data(dataset.data)}")
    return 0


def _render_data(data: object) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    if isinstance(data, str):
        return data
    return repr(data)


def _add_url_command(subparsers: Any, name: str, help_text: str) -> None:
    """Register a subcommand taking only a URL."""
    parser = subparsers.add_parser(name, help=help_text)
    parser.add_argument("url", help="Dataset URL")


def _add_convert_command(subparsers: Any) -> None:
    """Register convert subcommand."""
    parser = subparsers.add_parser("convert", help="Convert a URL to a target mime type")
    parser.add_argument("url", help="Dataset URL")
    parser.add_argument("--to", dest="target", required=True, help="Target mime type")


def _add_view_command(subparsers: Any) -> None:
    """Register view subcommand."""
    parser = subparsers.add_parser("view", help="Open a URL with a named viewer")
    parser.add_argument("url", help="Dataset URL")
    parser.add_argument("label", help="Viewer label")
