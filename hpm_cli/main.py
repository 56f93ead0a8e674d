"""Command line surface for the hpm package client."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Sequence

from hpm_builtin import (
    PackageInstaller,
    RegistryClient,
    link_packages,
    list_installed,
    package_info,
)
from hpm_core.config import HpmSettings, SettingsResolver
from hpm_core.errors import HpmError, UsageError
from hpm_core.store import StoreLayout, validate_package_name

CLI_VERSION = "0.1.0"
USAGE_HINT = 'Unknown command. Use "install", "list", "link", or "info".'

logger = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, HpmSettings], int]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hpm",
        description="hpm - install registry packages into a local store and link them into projects.",
    )
    parser.add_argument("--version", action="version", version=f"hpm v{CLI_VERSION}")
    parser.add_argument("--store-dir", dest="store_dir", help="package store directory")
    parser.add_argument("--registry", help="registry base URL")
    parser.add_argument("command", nargs="?", help="install, list, link or info")
    parser.add_argument("name", nargs="?", help="package name (install, info)")
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    resolver: SettingsResolver | None = None,
) -> int:
    """Resolve and run an hpm command; return the process exit code."""

    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code or 0

    if args.command is None:
        parser.print_help()
        return 0

    handler = _COMMANDS.get(args.command)
    if handler is None:
        print(USAGE_HINT)
        return 2

    resolver = resolver or SettingsResolver(
        cli_overrides={"store_dir": args.store_dir, "registry": args.registry}
    )
    settings = resolver.resolve()
    _configure_logging(settings.log_level)

    try:
        return handler(args, settings)
    except HpmError as exc:
        logger.debug("%s failed", args.command, exc_info=True)
        if isinstance(exc, UsageError):
            print(str(exc))
        else:
            print(f"Error: {exc}")
        return exc.exit_code


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level)


def _handle_install(args: argparse.Namespace, settings: HpmSettings) -> int:
    name = validate_package_name(args.name)
    client = RegistryClient(settings.registry, timeout=settings.timeout)
    installer = PackageInstaller(StoreLayout.from_root(settings.store_dir), client)
    result = installer.install(name)
    print(f"Package {result.name} installed successfully.")
    return 0


def _handle_list(_: argparse.Namespace, settings: HpmSettings) -> int:
    names = list_installed(StoreLayout.from_root(settings.store_dir))
    if names is None:
        print("No packages installed yet.")
        return 0
    print("Installed packages:")
    for name in names:
        print(name)
    return 0


def _handle_link(_: argparse.Namespace, settings: HpmSettings) -> int:
    layout = StoreLayout.from_root(settings.store_dir)
    report = link_packages(layout, Path.cwd(), settings.modules_dir)
    for name in report.created:
        print(f"Linked {name} -> {layout.package_dir(name)}")
    if not report.created:
        print("All installed packages are already linked.")
    return 0


def _handle_info(args: argparse.Namespace, settings: HpmSettings) -> int:
    info = package_info(StoreLayout.from_root(settings.store_dir), args.name)
    if info.installed:
        print(f"Package {info.name} is installed.")
        return 0
    print(f"Package {info.name} not found.")
    if info.orphaned:
        print(f"Package directory for {info.name} exists but the install did not complete.")
    return 1


_COMMANDS: dict[str, Handler] = {
    "install": _handle_install,
    "list": _handle_list,
    "link": _handle_link,
    "info": _handle_info,
}


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
