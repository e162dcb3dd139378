# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Host-facing session wiring resolution, expansion and validation together."""

from __future__ import annotations

import logging

from .cancellation import CancellationToken
from .config import Config
from .errors import SessionStateError
from .expander import DescriptorExpander, ExpandedArtifacts
from .http import HttpClient, UrllibHttpClient
from .models import AssetCatalog, ValidationResult, VersionDescriptor
from .paths import CacheLayout
from .platform import Platform
from .resolver import ManifestResolver, ResolvedVersion
from .validation import ProgressCallback, ValidationDriver

LOGGER = logging.getLogger(__name__)


class IndexSession:
    """Resolve one version and report which of its artifacts need downloading.

    Call :meth:`init` once, then :meth:`validate` as often as needed. The
    session owns the loaded descriptor and asset index for its lifetime.
    """

    def __init__(
        self,
        version: str,
        *,
        config: Config | None = None,
        client: HttpClient | None = None,
        platform: Platform | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        self.version = version
        self.config = config or Config()
        self.cancel_token = cancel_token or CancellationToken()
        self.layout = CacheLayout.for_root(self.config.common_dir)
        self._client = client or UrllibHttpClient(self.config.http)
        self._platform = platform
        self._resolved: ResolvedVersion | None = None

    @property
    def resolved(self) -> ResolvedVersion:
        """Return the resolution produced by :meth:`init`.

        Raises:
            SessionStateError: If :meth:`init` has not completed.
        """

        if self._resolved is None:
            raise SessionStateError("init() must complete before the session is used", resource="session")
        return self._resolved

    @property
    def descriptor(self) -> VersionDescriptor:
        return self.resolved.descriptor

    @property
    def asset_catalog(self) -> AssetCatalog:
        return self.resolved.asset_catalog

    def init(self) -> None:
        """Load the version manifest, descriptor and asset index.

        Raises:
            AssetResolutionError: If no usable descriptor or asset index exists.
            LocalCacheError: If a cached file is unreadable and cannot be replaced.
            OperationCancelledError: If the session was cancelled.
        """

        resolver = ManifestResolver(
            self._client,
            self.layout,
            manifest_url=self.config.endpoints.version_manifest,
            refetch_corrupt=self.config.validation.refetch_corrupt_cache,
            cancel_token=self.cancel_token,
        )
        self._resolved = resolver.resolve(self.version)
        LOGGER.info(
            "Resolved %s (descriptor: %s, asset index: %s)",
            self.version,
            self._resolved.descriptor_source.value,
            self._resolved.asset_catalog_source.value,
        )

    def expand(self) -> ExpandedArtifacts:
        """Return every artifact referenced by the resolved descriptor.

        Raises:
            SessionStateError: If :meth:`init` has not completed.
            LibraryResolutionError: If a compatible library cannot be resolved.
            UnsupportedPlatformError: If the running platform cannot be mapped.
        """

        resolved = self.resolved
        expander = DescriptorExpander(
            self.layout,
            asset_base_url=self.config.endpoints.asset_resources,
            platform=self._platform or Platform.current(),
        )
        return expander.expand(resolved.descriptor, resolved.asset_catalog)

    def validate(self, *, on_progress: ProgressCallback | None = None) -> ValidationResult:
        """Return the artifacts that must be fetched, grouped by category.

        Raises:
            SessionStateError: If :meth:`init` has not completed.
            OperationCancelledError: If the session was cancelled.
        """

        expanded = self.expand()
        driver = ValidationDriver(jobs=self.config.validation.jobs, cancel_token=self.cancel_token)
        result = driver.validate(expanded, on_progress=on_progress)
        LOGGER.info("%d of %d artifacts for %s need downloading", result.total, len(expanded), self.version)
        return result

    def cancel(self) -> None:
        """Cancel in-flight fetches and verification."""

        self.cancel_token.cancel()


__all__ = ["IndexSession"]
