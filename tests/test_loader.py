# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the verified cache loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from assetguard.errors import CacheWriteError, LocalCacheError, RemoteContentError
from assetguard.loader import ContentSource, LocalState, RemoteCacheLoader, write_through
from assetguard.models import AssetCatalog, HashSpec

from fakes import FakeHttpClient, encode, sha1

INDEX_URL = "https://launchermeta.mojang.com/v1/packages/abc/1.16.json"
INDEX_BODY = encode({"objects": {"icons/icon.png": {"hash": "deadbeef", "size": 3}}})


@pytest.fixture
def client() -> FakeHttpClient:
    return FakeHttpClient({INDEX_URL: INDEX_BODY})


def test_missing_local_fetches_and_writes_through(tmp_path: Path, client: FakeHttpClient) -> None:
    local = tmp_path / "indexes" / "1.16.json"

    result = RemoteCacheLoader(client).load(INDEX_URL, local, AssetCatalog, HashSpec(value=sha1(INDEX_BODY)))

    assert result.source is ContentSource.REMOTE
    assert result.local_state is LocalState.MISSING
    assert result.content is not None
    assert result.content.objects["icons/icon.png"].hash == "deadbeef"
    assert local.read_bytes() == INDEX_BODY


def test_written_copy_is_served_locally_on_next_load(tmp_path: Path, client: FakeHttpClient) -> None:
    local = tmp_path / "1.16.json"
    expected = HashSpec(value=sha1(INDEX_BODY))
    loader = RemoteCacheLoader(client)
    first = loader.load(INDEX_URL, local, AssetCatalog, expected)

    client.online = False
    second = loader.load(INDEX_URL, local, AssetCatalog, expected)

    assert second.source is ContentSource.LOCAL
    assert second.local_state is LocalState.VALID
    assert second.content == first.content
    assert client.requests == [INDEX_URL]


def test_hash_mismatch_triggers_refetch(tmp_path: Path, client: FakeHttpClient) -> None:
    local = tmp_path / "1.16.json"
    local.write_bytes(encode({"objects": {}}))

    result = RemoteCacheLoader(client).load(INDEX_URL, local, AssetCatalog, HashSpec(value=sha1(INDEX_BODY)))

    assert result.source is ContentSource.REMOTE
    assert result.local_state is LocalState.CORRUPT
    assert local.read_bytes() == INDEX_BODY


def test_without_hash_any_parseable_local_copy_is_accepted(tmp_path: Path, client: FakeHttpClient) -> None:
    local = tmp_path / "1.16.json"
    local.write_bytes(encode({"objects": {}}))

    result = RemoteCacheLoader(client).load(INDEX_URL, local, AssetCatalog)

    assert result.source is ContentSource.LOCAL
    assert result.content == AssetCatalog()
    assert client.requests == []


def test_network_failure_reports_unavailable(tmp_path: Path) -> None:
    result = RemoteCacheLoader(FakeHttpClient()).load(INDEX_URL, tmp_path / "1.16.json", AssetCatalog)

    assert result.source is ContentSource.UNAVAILABLE
    assert result.content is None
    assert not result.available
    assert not (tmp_path / "1.16.json").exists()


def test_unparsable_local_copy_raises_unless_refetch(tmp_path: Path, client: FakeHttpClient) -> None:
    local = tmp_path / "1.16.json"
    local.write_bytes(b"{not json")
    loader = RemoteCacheLoader(client)

    with pytest.raises(LocalCacheError) as excinfo:
        loader.load(INDEX_URL, local, AssetCatalog)
    assert excinfo.value.path == local

    result = loader.load(INDEX_URL, local, AssetCatalog, refetch_corrupt=True)
    assert result.source is ContentSource.REMOTE
    assert result.local_state is LocalState.CORRUPT


def test_fetched_body_is_persisted_even_when_digest_differs(
    tmp_path: Path, client: FakeHttpClient, caplog: pytest.LogCaptureFixture
) -> None:
    local = tmp_path / "1.16.json"
    local.write_bytes(b"stale")

    result = RemoteCacheLoader(client).load(
        INDEX_URL, local, AssetCatalog, HashSpec(value="0" * 40), refetch_corrupt=True
    )

    assert result.source is ContentSource.REMOTE
    assert result.local_state is LocalState.CORRUPT
    assert result.content is not None
    assert "icons/icon.png" in result.content.objects
    assert local.read_bytes() == INDEX_BODY
    assert "does not match" in caplog.text


def test_remote_body_must_parse(tmp_path: Path) -> None:
    client = FakeHttpClient({INDEX_URL: b"<html>maintenance</html>"})
    local = tmp_path / "1.16.json"

    with pytest.raises(RemoteContentError):
        RemoteCacheLoader(client).load(INDEX_URL, local, AssetCatalog)

    assert local.read_bytes() == b"<html>maintenance</html>"


def test_write_through_creates_parents_and_replaces(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "doc.json"

    write_through(target, b"one")
    write_through(target, b"two")

    assert target.read_bytes() == b"two"
    assert [path.name for path in target.parent.iterdir()] == ["doc.json"]


def test_write_through_reports_unwritable_target(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file in place of a directory", encoding="utf-8")

    with pytest.raises(CacheWriteError) as excinfo:
        write_through(blocker / "doc.json", b"body")

    assert excinfo.value.path == blocker / "doc.json"
