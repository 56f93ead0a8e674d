"""Expose store packages inside a project through symbolic links."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from hpm_core.errors import LinkError, NothingInstalledError
from hpm_core.manifest import ManifestStore
from hpm_core.store import StoreLayout

logger = logging.getLogger(__name__)


@dataclass
class LinkReport:
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def link_packages(layout: StoreLayout, project_dir: Path, modules_dir: str) -> LinkReport:
    """Link every recorded package into ``<project_dir>/<modules_dir>``.

    Destinations that already exist, including dangling links, are left alone.
    """

    manifest = ManifestStore(layout.manifest_file)
    if not manifest.exists():
        raise NothingInstalledError()

    target_root = Path(project_dir) / modules_dir
    report = LinkReport()
    try:
        target_root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise LinkError(f"Unable to create {target_root}") from exc

    for name in manifest.names():
        src = layout.package_dir(name)
        dest = target_root.joinpath(*name.split("/"))
        if os.path.lexists(dest):
            report.skipped.append(name)
            continue
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(src, dest, target_is_directory=True)
        except OSError as exc:
            raise LinkError(f"Unable to link {name} into {target_root}") from exc
        logger.debug("linked %s -> %s", dest, src)
        report.created.append(name)
    return report
