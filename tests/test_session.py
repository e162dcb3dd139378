# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end tests for :class:`assetguard.session.IndexSession`."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from assetguard import validation
from assetguard.config import Config
from assetguard.errors import ContentReadError, OperationCancelledError, SessionStateError
from assetguard.paths import CacheLayout
from assetguard.session import IndexSession

from fakes import LINUX_X64, FakeHttpClient, GameVersion, sha1


@pytest.fixture
def session(config: Config, http_client: FakeHttpClient) -> IndexSession:
    return IndexSession("1.16.5", config=config, client=http_client, platform=LINUX_X64)


def test_session_requires_init(session: IndexSession) -> None:
    with pytest.raises(SessionStateError):
        session.validate()
    with pytest.raises(SessionStateError):
        _ = session.descriptor


def test_fully_installed_version_needs_nothing(session: IndexSession, game: GameVersion) -> None:
    session.init()
    game.install(session.layout)

    result = session.validate()

    assert result.total == 0
    assert result.as_mapping() == {"assets": (), "libraries": (), "client": (), "misc": ()}


def test_empty_cache_reports_every_artifact(session: IndexSession, game: GameVersion, layout: CacheLayout) -> None:
    session.init()

    result = session.validate()

    assert len(result.assets) == 3
    assert {item.id for item in result.assets} == set(game.assets)
    assert [item.id for item in result.libraries] == [
        "com.mojang:brigadier:1.0.17",
        "org.lwjgl.lwjgl:lwjgl-platform:2.9.4",
    ]
    (client,) = result.client
    assert client.hash == sha1(game.client_jar)
    assert client.size == len(game.client_jar)
    assert client.url == game.descriptor["downloads"]["client"]["url"]
    assert client.path == layout.version_jar_path("1.16.5")
    (log_config,) = result.misc
    assert log_config.id == "client-1.12.xml"
    assert result.total_bytes == sum(item.size for items in result.as_mapping().values() for item in items)


def test_only_corrupt_artifacts_are_reported(session: IndexSession, game: GameVersion) -> None:
    session.init()
    game.install(session.layout)
    session.layout.version_jar_path("1.16.5").write_bytes(b"truncated")
    session.layout.library_path("com/mojang/brigadier/1.0.17/brigadier-1.0.17.jar").unlink()

    result = session.validate()

    assert [item.id for item in result.client] == ["1.16.5 client"]
    assert [item.id for item in result.libraries] == ["com.mojang:brigadier:1.0.17"]
    assert result.assets == ()
    assert result.misc == ()


def test_validation_is_idempotent(session: IndexSession, game: GameVersion) -> None:
    session.init()
    game.install(session.layout)
    session.layout.log_config_path("client-1.12.xml").unlink()

    first = session.validate()
    second = session.validate()

    assert first == second
    assert first.total == 1


def test_shared_asset_objects_are_hashed_once(session: IndexSession, monkeypatch: pytest.MonkeyPatch) -> None:
    session.init()
    calls: list[Path] = []
    lock = threading.Lock()

    def fake_verify(path: Path, algorithm: str, expected: str, *, cancel_token=None) -> bool:
        with lock:
            calls.append(path)
        return False

    monkeypatch.setattr(validation, "verify_file", fake_verify)

    result = session.validate()

    assert len(calls) == len(set(calls)) == 6
    assert len(result.assets) == 3


def test_unreadable_artifact_is_reported_not_fatal(
    session: IndexSession, game: GameVersion, monkeypatch: pytest.MonkeyPatch
) -> None:
    session.init()
    game.install(session.layout)
    jar = session.layout.version_jar_path("1.16.5")
    real_verify = validation.verify_file

    def flaky_verify(path: Path, algorithm: str, expected: str, *, cancel_token=None) -> bool:
        if path == jar:
            raise ContentReadError(path, "Input/output error")
        return real_verify(path, algorithm, expected, cancel_token=cancel_token)

    monkeypatch.setattr(validation, "verify_file", flaky_verify)

    result = session.validate()

    assert [item.path for item in result.client] == [jar]
    assert result.total == 1


def test_progress_reports_each_unique_verification(session: IndexSession) -> None:
    session.init()
    events: list[tuple[int, int]] = []

    session.validate(on_progress=lambda completed, total: events.append((completed, total)))

    assert [completed for completed, _ in events] == list(range(1, 7))
    assert events[-1] == (6, 6)


def test_cancelled_session_stops(session: IndexSession) -> None:
    session.init()
    session.cancel()

    with pytest.raises(OperationCancelledError):
        session.validate()


def test_cancelled_before_init_aborts_fetches(session: IndexSession) -> None:
    session.cancel()

    with pytest.raises(OperationCancelledError):
        session.init()


def test_resolution_survives_offline_restart(
    config: Config, http_client: FakeHttpClient, game: GameVersion
) -> None:
    IndexSession("1.16.5", config=config, client=http_client, platform=LINUX_X64).init()
    http_client.online = False

    offline = IndexSession("1.16.5", config=config, client=http_client, platform=LINUX_X64)
    offline.init()

    assert not offline.resolved.manifest_available
    assert offline.descriptor.id == game.version_id
    assert len(offline.asset_catalog.objects) == 3
