"""Install pipeline: resolve, download, extract, record."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from hpm_core.manifest import ManifestStore
from hpm_core.store import StoreLayout, validate_package_name

from .archive import extract_tarball
from .registry_client import RegistryClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallResult:
    name: str
    version: str
    tarball_url: str
    package_dir: Path


class PackageInstaller:
    """Install one package at a time into a store.

    Each stage either returns its result or raises an ``HpmError``; a failure
    stops the remaining stages but does not undo the earlier ones. A failed
    extraction can leave a partial package directory, which is never recorded
    in the manifest and so is not considered installed.
    """

    def __init__(self, layout: StoreLayout, client: RegistryClient) -> None:
        self.layout = layout
        self.client = client
        self.manifest = ManifestStore(layout.manifest_file)

    def install(self, name: str) -> InstallResult:
        name = validate_package_name(name)
        self.layout.ensure()

        version, tarball_url = self.client.resolve(name)
        tarball = self.client.download(tarball_url, name, self.layout.tarball_path(name))

        package_dir = self.layout.package_dir(name)
        try:
            extract_tarball(tarball, package_dir, name=name)
        finally:
            tarball.unlink(missing_ok=True)

        self.manifest.record(name)
        logger.info("installed %s@%s into %s", name, version, package_dir)
        return InstallResult(
            name=name,
            version=version,
            tarball_url=tarball_url,
            package_dir=package_dir,
        )
