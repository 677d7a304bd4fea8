"""Command-line entry point for the WCMS module registry builder."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from importlib import metadata
from pathlib import Path

from config import CONFIG, BuildSettings
from registry.errors import RegistryBuildError
from registry.fetcher import fetch_metadata
from registry.models import MODULE_TYPES
from registry.writer import build_and_write
from utils.http_client import HttpClient
from utils.logging_utils import configure_logging

PACKAGE_NAME = "wcms-modules-builder"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wcms-modules",
        description="Build the WCMS module registry (wcms-modules.json) from plugin and theme repository lists.",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default=None,
        metavar="LEVEL",
        help="Set logging level: debug, info, warning, error, or critical.",
    )
    parser.add_argument(
        "--version", "-v",
        action="store_true",
        help="Display version information and exit.",
    )
    parser.add_argument(
        "--config-info",
        action="store_true",
        help="Display current configuration settings and exit.",
    )

    subparsers = parser.add_subparsers(dest="command")

    build_cmd = subparsers.add_parser(
        "build",
        help="Fetch metadata for every listed repository and write the registry (default).",
    )
    _add_build_arguments(build_cmd)

    show_parser = subparsers.add_parser("show", help="Print the metadata published by a single repository.")
    show_parser.add_argument("url", help="GitHub repository URL, optionally with /tree/<branch>.")
    show_parser.add_argument(
        "--type",
        dest="module_type",
        choices=MODULE_TYPES,
        default="plugins",
        help="Category used for repositories without a manifest (default: plugins).",
    )
    show_parser.add_argument(
        "--timeout",
        type=float,
        default=CONFIG.network.request_timeout,
        help=f"Per-request timeout in seconds (default: {CONFIG.network.request_timeout:g}).",
    )

    return parser


def _add_build_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--plugins-list",
        type=Path,
        default=Path(CONFIG.build.plugins_list),
        help=f"File listing plugin repositories, one URL per line (default: {CONFIG.build.plugins_list}).",
    )
    parser.add_argument(
        "--themes-list",
        type=Path,
        default=Path(CONFIG.build.themes_list),
        help=f"File listing theme repositories, one URL per line (default: {CONFIG.build.themes_list}).",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path(CONFIG.build.output),
        help=f"Registry file to write (default: {CONFIG.build.output}).",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=CONFIG.build.concurrency_limit,
        help=(
            "Repositories fetched at once per list "
            f"({CONFIG.build.min_concurrency_limit}-{CONFIG.build.max_concurrency_limit}, "
            f"default: {CONFIG.build.concurrency_limit})."
        ),
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=CONFIG.network.request_timeout,
        help=f"Per-request timeout in seconds (default: {CONFIG.network.request_timeout:g}).",
    )
    parser.add_argument(
        "--no-atomic",
        dest="atomic_write",
        action="store_false",
        help="Write the registry in place instead of via a temporary file.",
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        return show_version()

    if args.config_info:
        return show_config_info()

    configure_logging(args.log_level.upper() if args.log_level else None)

    if args.command == "show":
        return run_show(args.url, args.module_type, args.timeout)

    if args.command is None:
        # Bare invocation builds with every default
        given = list(argv) if argv is not None else sys.argv[1:]
        args = parser.parse_args([*given, "build"])
    return run_build(args)


def run_build(args: argparse.Namespace) -> int:
    try:
        settings = BuildSettings(
            plugins_list=args.plugins_list,
            themes_list=args.themes_list,
            output=args.output,
            concurrency=args.concurrency,
            timeout=args.timeout,
            atomic_write=args.atomic_write,
        )
    except ValueError as exc:
        print(f"✗ Invalid option: {exc}", file=sys.stderr)
        return 2

    try:
        registry = build_and_write(settings)
    except (RegistryBuildError, OSError) as exc:
        print(f"✗ Registry build failed: {exc}", file=sys.stderr)
        return 1

    print(
        f"✓ Wrote {len(registry['plugins'])} plugins and {len(registry['themes'])} themes "
        f"to {settings.output}"
    )
    return 0


def run_show(url: str, module_type: str, timeout: float) -> int:
    try:
        with HttpClient(timeout=timeout) as client:
            repo_meta = fetch_metadata(url, module_type, client)  # type: ignore[arg-type]
    except RegistryBuildError as exc:
        print(f"✗ {exc}", file=sys.stderr)
        return 1

    collection = repo_meta.as_collection()
    payload = {"plugins": collection.plugins, "themes": collection.themes}
    print(json.dumps(payload, indent=4, ensure_ascii=False))
    return 0


def show_version() -> int:
    """Display version information."""
    print(f"WCMS module registry builder v{_get_version()}")
    print(f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    return 0


def show_config_info() -> int:
    """Display current configuration settings."""
    print("WCMS module registry builder - Configuration")
    print("=" * 60)

    print("\n[Network]")
    print(f"  Request timeout: {CONFIG.network.request_timeout:g}s")
    print(f"  Branch guesses: {', '.join(CONFIG.network.branch_guesses)}")

    print("\n[Registry]")
    print(f"  Format version: {CONFIG.registry.format_version}")
    print(f"  Manifest file: {CONFIG.registry.manifest_filename}")
    print(f"  Preview candidates: {', '.join(CONFIG.registry.preview_candidates)}")

    print("\n[Build]")
    print(f"  Plugins list: {CONFIG.build.plugins_list}")
    print(f"  Themes list: {CONFIG.build.themes_list}")
    print(f"  Output: {CONFIG.build.output}")
    print(f"  Concurrency limit: {CONFIG.build.concurrency_limit}")
    print(f"  Atomic write: {CONFIG.build.atomic_write}")

    print("\n" + "=" * 60)
    return 0


def _get_version() -> str:
    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0 (uninstalled workspace copy)"


if __name__ == "__main__":
    raise SystemExit(main())
