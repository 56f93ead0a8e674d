"""Repository for the installed-packages manifest.

The manifest is a single JSON object mapping package names to ``true``. It is
always read and rewritten as a whole. There is no locking: two installs that
run at the same time can overwrite each other's entry.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from .errors import ManifestError

logger = logging.getLogger(__name__)


class ManifestStore:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> dict[str, bool]:
        if not self.path.exists():
            return {}
        try:
            payload: Any = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ManifestError(f"Unable to read package manifest {self.path}") from exc
        if not isinstance(payload, dict):
            raise ManifestError(f"Package manifest {self.path} is not a JSON object")
        return {str(key): bool(value) for key, value in payload.items()}

    def save(self, packages: Mapping[str, bool]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(dict(packages), indent=2), encoding="utf-8")
        except OSError as exc:
            raise ManifestError(f"Unable to write package manifest {self.path}") from exc

    def record(self, name: str) -> None:
        packages = self.load()
        packages[name] = True
        self.save(packages)
        logger.debug("recorded %s in %s", name, self.path)

    def names(self) -> list[str]:
        return list(self.load())

    def contains(self, name: str) -> bool:
        return name in self.load()
