"""Typed errors raised by the hpm install pipeline and its collaborators."""

from __future__ import annotations


class HpmError(Exception):
    """Base hpm error. The message is meant to be shown to the user as-is."""

    exit_code = 1


class UsageError(HpmError):
    """The command line was incomplete or invalid."""

    exit_code = 2


class InvalidPackageNameError(UsageError):
    """The package name cannot be used as a registry key or store path."""


class ResolutionError(HpmError):
    """Registry metadata could not be fetched or understood."""


class DownloadError(HpmError):
    """The tarball could not be downloaded."""


class ExtractionError(HpmError):
    """The tarball could not be unpacked into the store."""


class ManifestError(HpmError):
    """The manifest file could not be read or written."""


class NothingInstalledError(HpmError):
    """No manifest exists yet, so there is nothing to operate on."""

    def __init__(self, message: str = "No packages installed yet.") -> None:
        super().__init__(message)


class LinkError(HpmError):
    """A project link could not be created."""


class StoreError(HpmError):
    """The package store directory could not be created."""
