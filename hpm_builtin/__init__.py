"""Native features of the hpm package client."""

from .archive import extract_tarball
from .installer import InstallResult, PackageInstaller
from .linker import LinkReport, link_packages
from .queries import PackageInfo, list_installed, package_info
from .registry_client import RegistryClient, RegistryMetadata, RegistryVersion

__all__ = [
    "InstallResult",
    "LinkReport",
    "PackageInfo",
    "PackageInstaller",
    "RegistryClient",
    "RegistryMetadata",
    "RegistryVersion",
    "extract_tarball",
    "link_packages",
    "list_installed",
    "package_info",
]
