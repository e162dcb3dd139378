# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from assetguard.config import Config
from assetguard.paths import CacheLayout

from fakes import ASSET_BASE_URL, MANIFEST_URL, FakeHttpClient, GameVersion


@pytest.fixture
def game() -> GameVersion:
    return GameVersion()


@pytest.fixture
def layout(tmp_path: Path) -> CacheLayout:
    return CacheLayout.for_root(tmp_path / "common")


@pytest.fixture
def config(layout: CacheLayout) -> Config:
    return Config.model_validate(
        {
            "common_dir": str(layout.common_dir),
            "endpoints": {"version_manifest": MANIFEST_URL, "asset_resources": ASSET_BASE_URL},
            "validation": {"jobs": 4},
        }
    )


@pytest.fixture
def http_client(game: GameVersion) -> FakeHttpClient:
    return FakeHttpClient(game.responses())
