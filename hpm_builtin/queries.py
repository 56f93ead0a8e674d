"""Read-only views over the manifest and the package store."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from hpm_core.manifest import ManifestStore
from hpm_core.store import StoreLayout, validate_package_name


@dataclass(frozen=True)
class PackageInfo:
    name: str
    installed: bool
    package_dir: Path
    orphaned: bool = False


def list_installed(layout: StoreLayout) -> list[str] | None:
    """Return recorded package names, or ``None`` when no manifest exists yet."""

    manifest = ManifestStore(layout.manifest_file)
    if not manifest.exists():
        return None
    return manifest.names()


def package_info(layout: StoreLayout, name: str) -> PackageInfo:
    # The manifest is authoritative; a directory without an entry is left
    # over from an install that did not complete.
    name = validate_package_name(name)
    package_dir = layout.package_dir(name)
    installed = ManifestStore(layout.manifest_file).contains(name)
    return PackageInfo(
        name=name,
        installed=installed,
        package_dir=package_dir,
        orphaned=not installed and package_dir.is_dir(),
    )
