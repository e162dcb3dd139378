# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve versioned game artifacts and verify the local cache against them."""

from __future__ import annotations

from .cancellation import CancellationToken
from .config import Config
from .config_loader import ConfigLoader
from .errors import (
    AssetCatalogDownloadError,
    AssetGuardError,
    AssetResolutionError,
    DescriptorDownloadError,
    InvalidVersionError,
    LibraryResolutionError,
    LocalCacheError,
    ManifestFormatError,
    OfflineUnresolvedError,
    OperationCancelledError,
    SessionStateError,
)
from .models import ResolvedArtifact, ValidationResult
from .session import IndexSession

__all__ = [
    "AssetCatalogDownloadError",
    "AssetGuardError",
    "AssetResolutionError",
    "CancellationToken",
    "Config",
    "ConfigLoader",
    "DescriptorDownloadError",
    "IndexSession",
    "InvalidVersionError",
    "LibraryResolutionError",
    "LocalCacheError",
    "ManifestFormatError",
    "OfflineUnresolvedError",
    "OperationCancelledError",
    "ResolvedArtifact",
    "SessionStateError",
    "ValidationResult",
]
