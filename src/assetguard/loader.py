# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Load JSON documents from a verified local cache with a remote fallback."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from .cancellation import CancellationToken
from .errors import CacheWriteError, LocalCacheError, NetworkUnavailableError, RemoteContentError
from .http import HttpClient
from .models import HashSpec
from .verify import digest_matches

LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ContentSource(str, Enum):
    """Where the returned content came from."""

    LOCAL = "local"
    REMOTE = "remote"
    UNAVAILABLE = "unavailable"


class LocalState(str, Enum):
    """State of the local cache file observed before any network access."""

    MISSING = "missing"
    VALID = "valid"
    CORRUPT = "corrupt"


@dataclass(frozen=True, slots=True)
class LoadResult(Generic[ModelT]):
    """Outcome of :meth:`RemoteCacheLoader.load`.

    ``content`` is ``None`` exactly when ``source`` is
    :attr:`ContentSource.UNAVAILABLE`.
    """

    content: ModelT | None
    source: ContentSource
    local_state: LocalState

    @property
    def available(self) -> bool:
        return self.source is not ContentSource.UNAVAILABLE


def write_through(path: Path, body: bytes) -> None:
    """Persist ``body`` at ``path`` creating parent directories as needed.

    The file is written to a sibling temporary file and renamed into place so a
    crash never leaves a truncated cache entry behind.

    Raises:
        CacheWriteError: If the directory or file cannot be written.
    """

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(body)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise CacheWriteError(path, exc.strerror or str(exc)) from exc


def parse_document(raw: bytes, model: type[ModelT]) -> ModelT:
    """Decode ``raw`` JSON into ``model``.

    Raises:
        pydantic.ValidationError: If the payload is not valid JSON for ``model``.
    """

    return model.model_validate_json(raw)


class RemoteCacheLoader:
    """Prefer a verified local copy of a document, else fetch and persist it."""

    def __init__(self, client: HttpClient, *, cancel_token: CancellationToken | None = None) -> None:
        self._client = client
        self._cancel_token = cancel_token

    def load(
        self,
        url: str,
        local_path: Path,
        model: type[ModelT],
        hash_spec: HashSpec | None = None,
        *,
        refetch_corrupt: bool = False,
    ) -> LoadResult[ModelT]:
        """Return the document at ``local_path`` or ``url``.

        Args:
            url: Remote location of the document.
            local_path: Cache location read first and written after every fetch.
            model: Pydantic model used to parse the document.
            hash_spec: Expected digest of the raw bytes; ``None`` accepts any
                parseable local copy.
            refetch_corrupt: Fall back to the network instead of raising when the
                local file exists but cannot be read or parsed.

        Returns:
            LoadResult[ModelT]: Parsed content and its provenance.

        Raises:
            LocalCacheError: If the local file is unreadable or unparsable and
                ``refetch_corrupt`` is false.
            RemoteContentError: If the fetched body fails to parse. The body is
                persisted first; a digest mismatch is only logged.
            CacheWriteError: If the fetched body cannot be persisted.
        """

        local_state = LocalState.MISSING
        if local_path.exists():
            try:
                cached = self._read_local(local_path, model, hash_spec)
            except LocalCacheError as exc:
                if not refetch_corrupt:
                    raise
                LOGGER.warning("%s; fetching %s instead", exc, url)
                local_state = LocalState.CORRUPT
            else:
                if cached is not None:
                    return LoadResult(content=cached, source=ContentSource.LOCAL, local_state=LocalState.VALID)
                LOGGER.info("Cached %s does not match expected hash, fetching %s", local_path, url)
                local_state = LocalState.CORRUPT

        try:
            body = self._client.fetch(url, cancel_token=self._cancel_token)
        except NetworkUnavailableError as exc:
            LOGGER.warning("%s", exc)
            return LoadResult(content=None, source=ContentSource.UNAVAILABLE, local_state=local_state)

        write_through(local_path, body)
        content = self._parse_remote(url, body, model, hash_spec)
        return LoadResult(content=content, source=ContentSource.REMOTE, local_state=local_state)

    @staticmethod
    def _read_local(path: Path, model: type[ModelT], hash_spec: HashSpec | None) -> ModelT | None:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise LocalCacheError(path, exc.strerror or str(exc)) from exc
        if hash_spec is not None and not digest_matches(raw, hash_spec.algorithm, hash_spec.value):
            return None
        try:
            return parse_document(raw, model)
        except ValidationError as exc:
            raise LocalCacheError(path, f"invalid document ({exc.error_count()} error(s))") from exc

    @staticmethod
    def _parse_remote(url: str, body: bytes, model: type[ModelT], hash_spec: HashSpec | None) -> ModelT:
        if hash_spec is not None and not digest_matches(body, hash_spec.algorithm, hash_spec.value):
            LOGGER.warning("Content fetched from %s does not match %s %s", url, hash_spec.algorithm, hash_spec.value)
        try:
            return parse_document(body, model)
        except ValidationError as exc:
            raise RemoteContentError(
                f"Content fetched from {url} is not a valid {model.__name__}",
                resource="url",
                identifier=url,
            ) from exc


__all__ = [
    "ContentSource",
    "LoadResult",
    "LocalState",
    "RemoteCacheLoader",
    "parse_document",
    "write_through",
]
