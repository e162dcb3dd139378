# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Cache layout helpers shared by the resolver and the expander."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

_FANOUT_WIDTH = 2


def object_prefix(content_hash: str) -> str:
    """Return the fan-out directory name for ``content_hash``.

    The first two hex characters split the object store 256 ways.
    """

    return content_hash[:_FANOUT_WIDTH]


@dataclass(frozen=True, slots=True)
class CacheLayout:
    """Describe where each artifact class lives below ``common_dir``."""

    common_dir: Path

    @classmethod
    def for_root(cls, common_dir: Path | str) -> CacheLayout:
        """Return a layout anchored at ``common_dir`` with ``~`` expanded."""

        return cls(common_dir=Path(common_dir).expanduser())

    @property
    def versions_dir(self) -> Path:
        return self.common_dir / "versions"

    @property
    def assets_dir(self) -> Path:
        return self.common_dir / "assets"

    @property
    def libraries_dir(self) -> Path:
        return self.common_dir / "libraries"

    @property
    def objects_dir(self) -> Path:
        return self.assets_dir / "objects"

    def version_json_path(self, version_id: str) -> Path:
        """Return the cached descriptor location for ``version_id``."""

        return self.versions_dir / version_id / f"{version_id}.json"

    def version_jar_path(self, version_id: str) -> Path:
        """Return the cached client jar location for ``version_id``."""

        return self.versions_dir / version_id / f"{version_id}.jar"

    def asset_index_path(self, index_id: str) -> Path:
        """Return the cached asset index location for ``index_id``."""

        return self.assets_dir / "indexes" / f"{index_id}.json"

    def asset_object_path(self, content_hash: str) -> Path:
        """Return the content-addressed location of an asset object."""

        return self.objects_dir / object_prefix(content_hash) / content_hash

    def log_config_path(self, file_id: str) -> Path:
        """Return the cached location of a logging configuration file."""

        return self.assets_dir / "log_configs" / file_id

    def library_path(self, relative_path: str) -> Path:
        """Return the cached location of a library artifact.

        ``relative_path`` uses forward slashes as published upstream.
        """

        return self.libraries_dir.joinpath(*PurePosixPath(relative_path).parts)


def asset_object_url(base_url: str, content_hash: str) -> str:
    """Return the CDN URL of an asset object below ``base_url``."""

    return f"{base_url.rstrip('/')}/{object_prefix(content_hash)}/{content_hash}"


__all__ = ["CacheLayout", "asset_object_url", "object_prefix"]
