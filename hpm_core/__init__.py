"""Core state and configuration pieces for the hpm package client."""

from .config import HpmSettings, SettingsResolver
from .errors import (
    DownloadError,
    ExtractionError,
    HpmError,
    InvalidPackageNameError,
    LinkError,
    ManifestError,
    NothingInstalledError,
    ResolutionError,
    StoreError,
    UsageError,
)
from .manifest import ManifestStore
from .paths import UserDirs
from .store import StoreLayout, validate_package_name

__all__ = [
    "DownloadError",
    "ExtractionError",
    "HpmError",
    "HpmSettings",
    "InvalidPackageNameError",
    "LinkError",
    "ManifestError",
    "ManifestStore",
    "NothingInstalledError",
    "ResolutionError",
    "SettingsResolver",
    "StoreError",
    "StoreLayout",
    "UsageError",
    "UserDirs",
    "validate_package_name",
]
