"""Streaming extraction of gzip-compressed package tarballs."""

from __future__ import annotations

import logging
import tarfile
import zlib
from pathlib import Path

from hpm_core.errors import ExtractionError

logger = logging.getLogger(__name__)


def extract_tarball(tar_path: Path, dest: Path, *, name: str) -> int:
    """Unpack ``tar_path`` into ``dest`` member by member; return the member count.

    ``dest`` is created if missing. The archive is read as a stream (``r|gz``)
    so it is never held in memory. Members that would land outside ``dest`` are
    rejected by the ``data`` filter.
    """

    dest = dest.resolve()
    count = 0
    try:
        dest.mkdir(parents=True, exist_ok=True)
        with tarfile.open(tar_path, mode="r|gz") as tf:
            for member in tf:
                tf.extract(member, dest, filter="data")
                count += 1
    except (tarfile.TarError, zlib.error, EOFError, OSError) as exc:
        logger.debug("extraction of %s failed after %d members: %s", tar_path, count, exc)
        raise ExtractionError(f"Failed to extract tarball for {name}") from exc
    logger.debug("extracted %d members from %s into %s", count, tar_path, dest)
    return count
