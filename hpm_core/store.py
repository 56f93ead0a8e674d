"""Layout helpers for the hpm package store."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .errors import InvalidPackageNameError, StoreError

__all__ = [
    "MANIFEST_FILE_NAME",
    "StoreLayout",
    "validate_package_name",
]

MANIFEST_FILE_NAME = "hpm-packages.json"
PACKAGES_DIR_NAME = "packages"
TMP_DIR_NAME = "tmp"
TARBALL_SUFFIX = ".tar.gz"


def validate_package_name(name: str | None) -> str:
    """Return the normalized name, or raise if it cannot name a store entry."""

    value = (name or "").strip()
    if not value:
        raise InvalidPackageNameError("Please provide a package name.")
    if "\\" in value or value.startswith("/"):
        raise InvalidPackageNameError(f"Invalid package name: {value}")
    parts = PurePosixPath(value).parts
    if not parts or any(part in (".", "..") for part in parts):
        raise InvalidPackageNameError(f"Invalid package name: {value}")
    # scoped names are "@scope/name"; anything deeper is not a package
    if len(parts) > 2 or (len(parts) == 2 and not parts[0].startswith("@")):
        raise InvalidPackageNameError(f"Invalid package name: {value}")
    return "/".join(parts)


@dataclass(frozen=True)
class StoreLayout:
    """Defines the directory structure of the package store.

    Package entries live under ``packages/`` and in-flight tarballs under
    ``tmp/``, so no package name can land on the manifest or on another
    package's download.
    """

    root: Path

    @classmethod
    def from_root(cls, root: Path | str) -> "StoreLayout":
        return cls(root=Path(root).expanduser().resolve())

    @property
    def manifest_file(self) -> Path:
        return self.root / MANIFEST_FILE_NAME

    @property
    def packages_dir(self) -> Path:
        return self.root / PACKAGES_DIR_NAME

    @property
    def tmp_dir(self) -> Path:
        return self.root / TMP_DIR_NAME

    def package_dir(self, name: str) -> Path:
        return self.packages_dir.joinpath(*PurePosixPath(name).parts)

    def tarball_path(self, name: str) -> Path:
        return self.tmp_dir.joinpath(*PurePosixPath(name + TARBALL_SUFFIX).parts)

    def ensure(self) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Unable to create package store {self.root}") from exc
