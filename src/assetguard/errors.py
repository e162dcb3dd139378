# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised while resolving and validating version indexes."""

from __future__ import annotations

from pathlib import Path


class AssetGuardError(RuntimeError):
    """Base class for every failure surfaced by assetguard.

    Attributes:
        resource: Kind of resource involved (``"version"``, ``"asset index"``...).
        identifier: Identifier of the resource (version id, path, url).
    """

    def __init__(self, message: str, *, resource: str | None = None, identifier: str | None = None) -> None:
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class AssetResolutionError(AssetGuardError):
    """Raised when no usable version descriptor or asset index can be produced."""


class InvalidVersionError(AssetResolutionError):
    """Raised when the requested version is absent from the version manifest."""


class ManifestFormatError(AssetResolutionError):
    """Raised when a descriptor URL no longer embeds its content hash."""


class DescriptorDownloadError(AssetResolutionError):
    """Raised when the version descriptor cannot be loaded locally or remotely."""


class OfflineUnresolvedError(AssetResolutionError):
    """Raised when the manifest is unreachable and no descriptor is cached."""


class AssetCatalogDownloadError(AssetResolutionError):
    """Raised when the asset index cannot be loaded locally or remotely."""


class LibraryResolutionError(AssetResolutionError):
    """Raised when a compatible library declares no resolvable artifact."""


class UnsupportedPlatformError(AssetGuardError):
    """Raised when the running OS or architecture has no Mojang equivalent."""


class UnsupportedHashAlgorithmError(AssetGuardError):
    """Raised when a digest algorithm is not provided by :mod:`hashlib`."""


class LocalCacheError(AssetGuardError):
    """Raised when an existing cache file cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failure while loading {path}: {reason}", resource="cache file", identifier=str(path))
        self.path = path


class CacheWriteError(AssetGuardError):
    """Raised when freshly fetched content cannot be persisted to the cache."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to write {path}: {reason}", resource="cache file", identifier=str(path))
        self.path = path


class ContentReadError(AssetGuardError):
    """Raised when a file exists but the OS refuses to let us hash it."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to read {path}: {reason}", resource="artifact", identifier=str(path))
        self.path = path


class RemoteContentError(AssetGuardError):
    """Raised when a remote document was fetched but could not be decoded."""


class NetworkUnavailableError(AssetGuardError):
    """Raised by HTTP clients when a request cannot be completed."""


class SessionStateError(AssetGuardError):
    """Raised when session operations are invoked out of order."""


class OperationCancelledError(AssetGuardError):
    """Raised when a cancellation token interrupts an in-flight operation."""


__all__ = [
    "AssetCatalogDownloadError",
    "AssetGuardError",
    "AssetResolutionError",
    "CacheWriteError",
    "ContentReadError",
    "DescriptorDownloadError",
    "InvalidVersionError",
    "LibraryResolutionError",
    "LocalCacheError",
    "ManifestFormatError",
    "NetworkUnavailableError",
    "OfflineUnresolvedError",
    "OperationCancelledError",
    "RemoteContentError",
    "SessionStateError",
    "UnsupportedHashAlgorithmError",
    "UnsupportedPlatformError",
]
