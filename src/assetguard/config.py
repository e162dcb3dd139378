# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for assetguard sessions."""

from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Any, Final
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_VERSION_MANIFEST: Final[str] = "https://launchermeta.mojang.com/mc/game/version_manifest.json"
DEFAULT_ASSET_RESOURCES: Final[str] = "https://resources.download.minecraft.net"
DEFAULT_COMMON_DIR: Final[Path] = Path.home() / ".assetguard"
_SUPPORTED_SCHEMES: Final[frozenset[str]] = frozenset({"https"})


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def default_parallel_jobs() -> int:
    """Return a CPU count scaled down for concurrent hashing.

    Returns:
        int: Rounded-down count representing roughly 75% of available CPU
        cores while guaranteeing a minimum of one worker.

    """
    cores = os.cpu_count() or 1
    return max(1, math.floor(cores * 0.75))


class HttpConfig(BaseModel):
    """HTTP client behaviour used for manifest and index downloads."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    timeout_seconds: float = Field(default=30.0, gt=0)
    user_agent: str = "assetguard/0.1"
    chunk_size: int = Field(default=64 * 1024, gt=0)


class EndpointConfig(BaseModel):
    """Upstream endpoints consulted during resolution."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    version_manifest: str = DEFAULT_VERSION_MANIFEST
    asset_resources: str = DEFAULT_ASSET_RESOURCES

    @field_validator("version_manifest", "asset_resources")
    @classmethod
    def _require_https(cls, value: str) -> str:
        scheme = urlparse(value).scheme.lower()
        if scheme not in _SUPPORTED_SCHEMES:
            raise ValueError(f"unsupported scheme '{scheme}' for endpoint {value}")
        return value


class ValidationConfig(BaseModel):
    """Knobs controlling the verification pass."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    jobs: int = Field(default_factory=default_parallel_jobs, ge=1)
    refetch_corrupt_cache: bool = True


class Config(BaseModel):
    """Top level configuration for a resolution/validation session."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    common_dir: Path = DEFAULT_COMMON_DIR
    http: HttpConfig = Field(default_factory=HttpConfig)
    endpoints: EndpointConfig = Field(default_factory=EndpointConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    @field_validator("common_dir", mode="after")
    @classmethod
    def _expand_common_dir(cls, value: Path) -> Path:
        return value.expanduser()

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation of the configuration."""

        return self.model_dump(mode="json")


__all__ = [
    "Config",
    "ConfigError",
    "DEFAULT_ASSET_RESOURCES",
    "DEFAULT_VERSION_MANIFEST",
    "EndpointConfig",
    "HttpConfig",
    "ValidationConfig",
    "default_parallel_jobs",
]
