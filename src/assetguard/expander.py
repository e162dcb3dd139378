# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expand a version descriptor into the concrete artifacts it references."""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from .errors import LibraryResolutionError
from .models import (
    ArtifactCandidate,
    ArtifactCategory,
    AssetCatalog,
    LibraryArtifact,
    LibraryEntry,
    LibraryRule,
    ResolvedArtifact,
    VersionDescriptor,
)
from .paths import CacheLayout, asset_object_url
from .platform import Platform


def _rule_applies(rule: LibraryRule, platform: Platform) -> bool:
    """Return ``True`` when ``rule`` targets ``platform``.

    Feature-gated rules (demo user, custom resolution...) never apply since no
    launcher features are enabled.
    """

    if rule.features:
        return False
    constraint = rule.os
    if constraint is None:
        return True
    if constraint.name is not None and constraint.name != platform.os.mojang_key:
        return False
    if constraint.arch is not None and constraint.arch != platform.arch.value:
        return False
    if constraint.version is not None:
        if platform.os_version is None:
            return False
        try:
            return re.search(constraint.version, platform.os_version) is not None
        except re.error:
            return False
    return True


def rules_allow(rules: Sequence[LibraryRule], platform: Platform) -> bool:
    """Evaluate ``rules`` for ``platform``; the last applicable rule wins.

    An empty rule list allows the library, like an absent one.
    """

    if not rules:
        return True
    allowed = False
    for rule in rules:
        if _rule_applies(rule, platform):
            allowed = rule.action == "allow"
    return allowed


def is_library_compatible(entry: LibraryEntry, platform: Platform) -> bool:
    """Return ``True`` when ``entry`` should be present on ``platform``."""

    if entry.rules is not None and not rules_allow(entry.rules, platform):
        return False
    if entry.natives is not None:
        return platform.os.mojang_key in entry.natives
    return True


def _coerce_artifact(entry: LibraryEntry, raw: Any, label: str) -> LibraryArtifact:
    if raw is None:
        raise LibraryResolutionError(
            f"Library {entry.name} does not provide {label}.", resource="library", identifier=entry.name
        )
    try:
        return LibraryArtifact.model_validate(raw)
    except ValidationError as exc:
        raise LibraryResolutionError(
            f"Library {entry.name} declares a malformed {label}.", resource="library", identifier=entry.name
        ) from exc


def resolve_library_artifact(entry: LibraryEntry, platform: Platform) -> LibraryArtifact:
    """Return the artifact to install for a compatible ``entry``.

    Raises:
        LibraryResolutionError: If the descriptor does not provide the artifact
            the compatibility rules say should exist.
    """

    if entry.natives is None:
        return _coerce_artifact(entry, entry.downloads.artifact, "an artifact")

    template = entry.natives.get(platform.os.mojang_key)
    if template is None:
        raise LibraryResolutionError(
            f"Library {entry.name} has no native classifier for {platform.os.mojang_key}.",
            resource="library",
            identifier=entry.name,
        )
    classifier = platform.substitute_arch(template)
    raw = (entry.downloads.classifiers or {}).get(classifier)
    return _coerce_artifact(entry, raw, f"classifier {classifier}")


@dataclass(frozen=True, slots=True)
class ExpandedArtifacts:
    """Every artifact referenced by a descriptor, grouped by category."""

    assets: tuple[ResolvedArtifact, ...]
    libraries: tuple[ResolvedArtifact, ...]
    client: tuple[ResolvedArtifact, ...]
    misc: tuple[ResolvedArtifact, ...]

    def candidates(self) -> Iterator[ArtifactCandidate]:
        """Yield every artifact tagged with its category."""

        for category in ArtifactCategory:
            for artifact in getattr(self, category.value):
                yield ArtifactCandidate(category=category, artifact=artifact)

    def __len__(self) -> int:
        return len(self.assets) + len(self.libraries) + len(self.client) + len(self.misc)


class DescriptorExpander:
    """Turn a descriptor and its asset index into addressable artifacts."""

    def __init__(self, layout: CacheLayout, *, asset_base_url: str, platform: Platform) -> None:
        self._layout = layout
        self._asset_base_url = asset_base_url
        self._platform = platform

    def expand(self, descriptor: VersionDescriptor, asset_catalog: AssetCatalog) -> ExpandedArtifacts:
        """Enumerate assets, libraries, client and log config for ``descriptor``.

        Raises:
            LibraryResolutionError: If a compatible library cannot be resolved.
        """

        return ExpandedArtifacts(
            assets=tuple(self.assets(asset_catalog)),
            libraries=tuple(self.libraries(descriptor)),
            client=(self.client(descriptor),),
            misc=tuple(self.misc(descriptor)),
        )

    def assets(self, asset_catalog: AssetCatalog) -> Iterator[ResolvedArtifact]:
        for name, ref in asset_catalog.objects.items():
            yield ResolvedArtifact(
                id=name,
                hash=ref.hash,
                size=ref.size,
                url=asset_object_url(self._asset_base_url, ref.hash),
                path=self._layout.asset_object_path(ref.hash),
            )

    def libraries(self, descriptor: VersionDescriptor) -> Iterator[ResolvedArtifact]:
        for entry in descriptor.libraries:
            if not is_library_compatible(entry, self._platform):
                continue
            artifact = resolve_library_artifact(entry, self._platform)
            yield ResolvedArtifact(
                id=entry.name,
                hash=artifact.sha1,
                size=artifact.size,
                url=artifact.url,
                path=self._layout.library_path(artifact.path),
            )

    def client(self, descriptor: VersionDescriptor) -> ResolvedArtifact:
        download = descriptor.downloads.client
        return ResolvedArtifact(
            id=f"{descriptor.id} client",
            hash=download.sha1,
            size=download.size,
            url=download.url,
            path=self._layout.version_jar_path(descriptor.id),
        )

    def misc(self, descriptor: VersionDescriptor) -> Iterator[ResolvedArtifact]:
        if descriptor.logging is None:
            return
        log_file = descriptor.logging.client.file
        yield ResolvedArtifact(
            id=log_file.id,
            hash=log_file.sha1,
            size=log_file.size,
            url=log_file.url,
            path=self._layout.log_config_path(log_file.id),
        )


__all__ = [
    "DescriptorExpander",
    "ExpandedArtifacts",
    "is_library_compatible",
    "resolve_library_artifact",
    "rules_allow",
]
