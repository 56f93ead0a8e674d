from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Tuple
from urllib.parse import quote

import requests
from requests import RequestException, Response

from hpm_core.errors import DownloadError, ResolutionError

log = logging.getLogger(__name__)

_OK_STATUSES = range(200, 300)


@dataclass(frozen=True)
class RegistryVersion:
    """Distribution info for a single published version."""

    version: str
    tarball: str | None

    @classmethod
    def from_dict(cls, version: str, data: Any) -> "RegistryVersion":
        dist = data.get("dist") if isinstance(data, Mapping) else None
        tarball = dist.get("tarball") if isinstance(dist, Mapping) else None
        if not isinstance(tarball, str) or not tarball:
            tarball = None
        return cls(version=version, tarball=tarball)


@dataclass(frozen=True)
class RegistryMetadata:
    name: str
    latest: str
    versions: Mapping[str, RegistryVersion]

    @classmethod
    def from_dict(cls, name: str, data: Any) -> "RegistryMetadata":
        """Validate the registry document; raise ``ValueError`` on bad shape."""

        if not isinstance(data, Mapping):
            raise ValueError("registry document is not an object")
        tags = data.get("dist-tags")
        latest = tags.get("latest") if isinstance(tags, Mapping) else None
        if not isinstance(latest, str) or not latest:
            raise ValueError("dist-tags.latest is missing")
        raw_versions = data.get("versions")
        if not isinstance(raw_versions, Mapping):
            raise ValueError("versions is missing")
        versions = {
            str(version): RegistryVersion.from_dict(str(version), info)
            for version, info in raw_versions.items()
        }
        return cls(name=str(data.get("name") or name), latest=latest, versions=versions)

    def latest_tarball(self) -> str:
        entry = self.versions.get(self.latest)
        if entry is None:
            raise ValueError(f"latest version {self.latest} is not listed")
        if not entry.tarball:
            raise ValueError(f"version {self.latest} has no tarball")
        return entry.tarball


@dataclass
class RegistryClient:
    """HTTP client for an npm-style package registry."""

    base_url: str
    timeout: float | Tuple[float, float] = 30.0
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    def package_url(self, name: str) -> str:
        return f"{self.base_url}/{quote(name, safe='@')}"

    def get_metadata(self, name: str) -> RegistryMetadata:
        url = self.package_url(name)
        log.debug("GET %s", url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except RequestException as exc:
            log.debug("metadata request for %s failed: %s", name, exc)
            raise ResolutionError(f"Unable to fetch package information for {name}") from exc

        if resp.status_code not in _OK_STATUSES:
            log.debug("metadata request for %s returned %s", name, resp.status_code)
            raise ResolutionError(f"Unable to fetch package information for {name}")

        try:
            return RegistryMetadata.from_dict(name, resp.json())
        except ValueError as exc:
            log.debug("bad registry document for %s: %s", name, exc)
            raise ResolutionError(f"Failed to parse package data for {name}") from exc

    def resolve(self, name: str) -> tuple[str, str]:
        """Return ``(version, tarball_url)`` for the latest published version."""

        metadata = self.get_metadata(name)
        try:
            tarball = metadata.latest_tarball()
        except ValueError as exc:
            log.debug("bad registry document for %s: %s", name, exc)
            raise ResolutionError(f"Failed to parse package data for {name}") from exc
        log.info("resolved %s@%s -> %s", name, metadata.latest, tarball)
        return metadata.latest, tarball

    def download(
        self,
        url: str,
        name: str,
        out_path: Path | str,
        *,
        chunk_size: int = 1024 * 1024,
    ) -> Path:
        """Stream ``url`` into ``out_path``; the file is closed on return."""

        try:
            resp = self.session.get(url, stream=True, timeout=self.timeout)
        except RequestException as exc:
            log.debug("download of %s failed: %s", url, exc)
            raise DownloadError(f"Unable to download tarball for {name}") from exc

        with resp:
            if resp.status_code not in _OK_STATUSES:
                self._raise_download_error(resp, name)
            target = Path(out_path)
            written = 0
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                with target.open("wb") as f:
                    for chunk in resp.iter_content(chunk_size=chunk_size):
                        if chunk:
                            f.write(chunk)
                            written += len(chunk)
            except (RequestException, OSError) as exc:
                target.unlink(missing_ok=True)
                log.debug("download of %s interrupted: %s", url, exc)
                raise DownloadError(f"Unable to download tarball for {name}") from exc

        log.info("downloaded %s (%d bytes) -> %s", url, written, target)
        return target

    def _raise_download_error(self, resp: Response, name: str) -> None:
        log.debug("download for %s returned %s", name, resp.status_code)
        raise DownloadError(f"Failed to download tarball for {name}")
