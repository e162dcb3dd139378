# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve a version descriptor and its asset index from the upstream manifest.

Resolution is a three tier cascade:

1. the upstream version manifest is fetched best-effort;
2. with a manifest, the descriptor is loaded from cache or network and verified
   against the hash embedded in its URL;
3. without one, a previously cached descriptor is trusted as-is.

The asset index named by the descriptor is then loaded the same way.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

from pydantic import ValidationError

from .cancellation import CancellationToken
from .errors import (
    AssetCatalogDownloadError,
    DescriptorDownloadError,
    InvalidVersionError,
    LocalCacheError,
    ManifestFormatError,
    NetworkUnavailableError,
    OfflineUnresolvedError,
    RemoteContentError,
)
from .http import HttpClient
from .loader import ContentSource, RemoteCacheLoader, parse_document
from .models import AssetCatalog, HashSpec, VersionCatalog, VersionDescriptor
from .paths import CacheLayout

LOGGER = logging.getLogger(__name__)

DESCRIPTOR_HASH_ALGORITHM: Final[str] = "sha1"
_DESCRIPTOR_URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^https://[^/]+/v1/packages/([^/]+)/[^/]+\.json$")


def descriptor_hash_from_url(url: str) -> str | None:
    """Return the content hash embedded in a descriptor URL.

    Well formed URLs look like ``https://<host>/v1/packages/<hash>/<id>.json``.

    Returns:
        str | None: The hash path segment, or ``None`` when ``url`` has another shape.
    """

    match = _DESCRIPTOR_URL_PATTERN.match(url)
    if match is None:
        return None
    return match.group(1)


@dataclass(frozen=True, slots=True)
class ResolvedVersion:
    """Descriptor and asset index produced by a successful resolution."""

    descriptor: VersionDescriptor
    asset_catalog: AssetCatalog
    manifest_available: bool
    descriptor_source: ContentSource
    asset_catalog_source: ContentSource


class ManifestResolver:
    """Locate, verify and load the descriptor for a requested version."""

    def __init__(
        self,
        client: HttpClient,
        layout: CacheLayout,
        *,
        manifest_url: str,
        refetch_corrupt: bool = True,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        self._client = client
        self._layout = layout
        self._manifest_url = manifest_url
        self._refetch_corrupt = refetch_corrupt
        self._cancel_token = cancel_token
        self._loader = RemoteCacheLoader(client, cancel_token=cancel_token)

    def fetch_manifest(self) -> VersionCatalog | None:
        """Fetch the upstream version manifest, returning ``None`` on any failure."""

        try:
            body = self._client.fetch(self._manifest_url, cancel_token=self._cancel_token)
        except NetworkUnavailableError as exc:
            LOGGER.warning("Unable to load version manifest: %s", exc)
            return None
        try:
            return parse_document(body, VersionCatalog)
        except ValidationError as exc:
            LOGGER.warning("Version manifest at %s could not be decoded: %s", self._manifest_url, exc)
            return None

    def resolve(self, version_id: str) -> ResolvedVersion:
        """Return the descriptor and asset index for ``version_id``.

        Raises:
            InvalidVersionError: If the manifest does not list ``version_id``.
            ManifestFormatError: If the descriptor URL does not embed a hash.
            DescriptorDownloadError: If the descriptor cannot be obtained.
            OfflineUnresolvedError: If the manifest is unreachable and nothing is cached.
            AssetCatalogDownloadError: If the asset index cannot be obtained.
            LocalCacheError: If a cached file is unreadable and cannot be replaced.
        """

        manifest = self.fetch_manifest()
        if manifest is not None:
            descriptor, descriptor_source = self._load_descriptor(version_id, manifest)
        else:
            descriptor, descriptor_source = self._load_offline_descriptor(version_id), ContentSource.LOCAL
        asset_catalog, catalog_source = self._load_asset_catalog(descriptor)
        return ResolvedVersion(
            descriptor=descriptor,
            asset_catalog=asset_catalog,
            manifest_available=manifest is not None,
            descriptor_source=descriptor_source,
            asset_catalog_source=catalog_source,
        )

    def _load_descriptor(self, version_id: str, manifest: VersionCatalog) -> tuple[VersionDescriptor, ContentSource]:
        entry = manifest.find(version_id)
        if entry is None:
            raise InvalidVersionError(f"Invalid version: {version_id}.", resource="version", identifier=version_id)
        expected_hash = descriptor_hash_from_url(entry.url)
        if expected_hash is None:
            raise ManifestFormatError(
                f"Format of the version manifest has changed; cannot derive a hash from {entry.url}.",
                resource="version",
                identifier=version_id,
            )
        try:
            result = self._loader.load(
                entry.url,
                self._layout.version_json_path(version_id),
                VersionDescriptor,
                HashSpec(algorithm=DESCRIPTOR_HASH_ALGORITHM, value=expected_hash),
                refetch_corrupt=self._refetch_corrupt,
            )
        except RemoteContentError as exc:
            raise DescriptorDownloadError(
                f"Failed to download {version_id} json index: {exc}", resource="version", identifier=version_id
            ) from exc
        if result.content is None:
            raise DescriptorDownloadError(
                f"Failed to download {version_id} json index.", resource="version", identifier=version_id
            )
        LOGGER.debug("Loaded %s descriptor from %s", version_id, result.source.value)
        return result.content, result.source

    def _load_offline_descriptor(self, version_id: str) -> VersionDescriptor:
        path = self._layout.version_json_path(version_id)
        if not path.exists():
            raise OfflineUnresolvedError(
                f"Unable to load version manifest and {version_id} json index does not exist locally.",
                resource="version",
                identifier=version_id,
            )
        LOGGER.info("Version manifest unavailable, using cached descriptor %s", path)
        try:
            return parse_document(path.read_bytes(), VersionDescriptor)
        except OSError as exc:
            raise LocalCacheError(path, exc.strerror or str(exc)) from exc
        except ValidationError as exc:
            raise LocalCacheError(path, f"invalid document ({exc.error_count()} error(s))") from exc

    def _load_asset_catalog(self, descriptor: VersionDescriptor) -> tuple[AssetCatalog, ContentSource]:
        ref = descriptor.asset_index
        try:
            result = self._loader.load(
                ref.url,
                self._layout.asset_index_path(ref.id),
                AssetCatalog,
                HashSpec(algorithm=DESCRIPTOR_HASH_ALGORITHM, value=ref.sha1),
                refetch_corrupt=self._refetch_corrupt,
            )
        except RemoteContentError as exc:
            raise AssetCatalogDownloadError(
                f"Failed to download {ref.id} asset index: {exc}", resource="asset index", identifier=ref.id
            ) from exc
        if result.content is None:
            raise AssetCatalogDownloadError(
                f"Failed to download {ref.id} asset index.", resource="asset index", identifier=ref.id
            )
        return result.content, result.source


__all__ = ["ManifestResolver", "ResolvedVersion", "descriptor_hash_from_url"]
