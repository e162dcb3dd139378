# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Pydantic models describing version manifests, descriptors and artifacts."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .verify import DEFAULT_ALGORITHM


class _ManifestModel(BaseModel):
    """Base configuration shared by documents parsed from upstream JSON."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class VersionCatalogEntry(_ManifestModel):
    """One row of the upstream version manifest."""

    id: str
    url: str
    type: str | None = None
    time: str | None = None
    release_time: str | None = Field(default=None, alias="releaseTime")


class LatestVersions(_ManifestModel):
    """Latest release and snapshot identifiers advertised by the manifest."""

    release: str | None = None
    snapshot: str | None = None


class VersionCatalog(_ManifestModel):
    """The upstream version manifest listing every known version."""

    latest: LatestVersions = Field(default_factory=LatestVersions)
    versions: tuple[VersionCatalogEntry, ...] = ()

    @model_validator(mode="after")
    def _ensure_unique_ids(self) -> VersionCatalog:
        seen: set[str] = set()
        for entry in self.versions:
            if entry.id in seen:
                raise ValueError(f"duplicate version id '{entry.id}' in version manifest")
            seen.add(entry.id)
        return self

    def find(self, version_id: str) -> VersionCatalogEntry | None:
        """Return the entry whose id equals ``version_id`` when present."""

        for entry in self.versions:
            if entry.id == version_id:
                return entry
        return None


class AssetCatalogRef(_ManifestModel):
    """Reference from a descriptor to its asset index."""

    id: str
    url: str
    sha1: str
    size: int | None = None
    total_size: int | None = Field(default=None, alias="totalSize")


class DownloadInfo(_ManifestModel):
    """Location and integrity data for a directly addressed download."""

    url: str
    sha1: str
    size: int


class LibraryArtifact(DownloadInfo):
    """A library jar stored below the libraries directory."""

    path: str


class OsRule(_ManifestModel):
    """OS constraint attached to a library rule."""

    name: str | None = None
    arch: str | None = None
    version: str | None = None


class LibraryRule(_ManifestModel):
    """A single allow/disallow rule attached to a library."""

    action: Literal["allow", "disallow"]
    os: OsRule | None = None
    features: dict[str, bool] | None = None


class LibraryDownloads(_ManifestModel):
    """Plain and classifier-specific artifacts for a library.

    Artifacts stay raw until the library is known to apply to the current
    platform; see :func:`assetguard.expander.resolve_library_artifact`.
    """

    artifact: dict[str, Any] | None = None
    classifiers: dict[str, Any] | None = None


class LibraryEntry(_ManifestModel):
    """A library declared by a version descriptor."""

    name: str
    rules: tuple[LibraryRule, ...] | None = None
    natives: dict[str, str] | None = None
    downloads: LibraryDownloads = Field(default_factory=LibraryDownloads)


class LogFileRef(DownloadInfo):
    """Log configuration file referenced by the descriptor."""

    id: str


class ClientLogging(_ManifestModel):
    """Client logging block of a descriptor."""

    file: LogFileRef
    argument: str | None = None
    type: str | None = None


class LoggingSection(_ManifestModel):
    """Top level ``logging`` object of a descriptor."""

    client: ClientLogging


class VersionDownloads(_ManifestModel):
    """Top level ``downloads`` object of a descriptor."""

    client: DownloadInfo
    server: DownloadInfo | None = None


class VersionDescriptor(_ManifestModel):
    """The per-version manifest describing assets, libraries and downloads."""

    id: str
    asset_index: AssetCatalogRef = Field(alias="assetIndex")
    libraries: tuple[LibraryEntry, ...] = ()
    downloads: VersionDownloads
    logging: LoggingSection | None = None


class AssetObjectRef(_ManifestModel):
    """Content-addressed object referenced by an asset index."""

    hash: str
    size: int


class AssetCatalog(_ManifestModel):
    """Mapping of logical asset names to content-addressed objects."""

    objects: dict[str, AssetObjectRef] = Field(default_factory=dict)


class HashSpec(_ManifestModel):
    """Expected digest paired with the algorithm producing it."""

    algorithm: str = DEFAULT_ALGORITHM
    value: str


class ArtifactCategory(str, Enum):
    """Categories reported by validation."""

    ASSETS = "assets"
    LIBRARIES = "libraries"
    CLIENT = "client"
    MISC = "misc"


class ResolvedArtifact(_ManifestModel):
    """An addressable artifact whose local copy must be (re)fetched."""

    id: str
    hash: str
    size: int
    url: str
    path: Path


class ArtifactCandidate(_ManifestModel):
    """An artifact enumerated from a descriptor prior to verification."""

    category: ArtifactCategory
    artifact: ResolvedArtifact
    algorithm: str = DEFAULT_ALGORITHM


class ValidationResult(_ManifestModel):
    """Artifacts failing verification grouped by category."""

    assets: tuple[ResolvedArtifact, ...] = ()
    libraries: tuple[ResolvedArtifact, ...] = ()
    client: tuple[ResolvedArtifact, ...] = ()
    misc: tuple[ResolvedArtifact, ...] = ()

    def as_mapping(self) -> Mapping[str, tuple[ResolvedArtifact, ...]]:
        """Return the result keyed by category name."""

        return {category.value: getattr(self, category.value) for category in ArtifactCategory}

    @property
    def total(self) -> int:
        """Return the number of artifacts requiring a download."""

        return sum(len(items) for items in self.as_mapping().values())

    @property
    def total_bytes(self) -> int:
        """Return the combined declared size of every reported artifact."""

        return sum(item.size for items in self.as_mapping().values() for item in items)


__all__ = [
    "ArtifactCandidate",
    "ArtifactCategory",
    "AssetCatalog",
    "AssetCatalogRef",
    "AssetObjectRef",
    "ClientLogging",
    "DownloadInfo",
    "HashSpec",
    "LatestVersions",
    "LibraryArtifact",
    "LibraryDownloads",
    "LibraryEntry",
    "LibraryRule",
    "LogFileRef",
    "LoggingSection",
    "OsRule",
    "ResolvedArtifact",
    "ValidationResult",
    "VersionCatalog",
    "VersionCatalogEntry",
    "VersionDescriptor",
    "VersionDownloads",
]
