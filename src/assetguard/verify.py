# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Content verification helpers.

Every hash comparison performed by assetguard goes through this module so the
rules for "missing", "invalid" and "unreadable" stay in one place:

* a missing path (or a directory in its place) is simply invalid;
* a digest mismatch is invalid;
* an OS refusing the read (permissions, I/O errors) raises
  :class:`~assetguard.errors.ContentReadError`.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Final

from .cancellation import CancellationToken, check_cancelled
from .errors import ContentReadError, UnsupportedHashAlgorithmError

DEFAULT_ALGORITHM: Final[str] = "sha1"
_CHUNK_SIZE: Final[int] = 1024 * 1024


def _new_hasher(algorithm: str) -> hashlib._Hash:
    try:
        return hashlib.new(algorithm.lower(), usedforsecurity=False)
    except ValueError as exc:
        raise UnsupportedHashAlgorithmError(
            f"Unsupported hash algorithm '{algorithm}'", resource="hash", identifier=algorithm
        ) from exc


def compute_digest(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Return the hex digest of ``data`` under ``algorithm``.

    Args:
        data: Raw bytes to hash.
        algorithm: :mod:`hashlib` algorithm name.

    Returns:
        str: Lower-case hexadecimal digest.

    Raises:
        UnsupportedHashAlgorithmError: If ``algorithm`` is unknown.
    """

    hasher = _new_hasher(algorithm)
    hasher.update(data)
    return hasher.hexdigest()


def digest_matches(data: bytes, algorithm: str, expected_hash: str) -> bool:
    """Return ``True`` when ``data`` hashes to ``expected_hash``."""

    return compute_digest(data, algorithm) == expected_hash.lower()


def hash_file(path: Path, algorithm: str = DEFAULT_ALGORITHM, *, cancel_token: CancellationToken | None = None) -> str:
    """Stream ``path`` through ``algorithm`` and return the hex digest.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        OperationCancelledError: If ``cancel_token`` is cancelled mid-read.
    """

    hasher = _new_hasher(algorithm)
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            check_cancelled(cancel_token)
            hasher.update(chunk)
    return hasher.hexdigest()


def verify_file(
    path: Path,
    algorithm: str,
    expected_hash: str,
    *,
    cancel_token: CancellationToken | None = None,
) -> bool:
    """Report whether ``path`` exists and its digest equals ``expected_hash``.

    Args:
        path: Local file to check.
        algorithm: :mod:`hashlib` algorithm name, usually ``"sha1"``.
        expected_hash: Hex digest declared by the manifest.
        cancel_token: Optional token polled between read chunks.

    Returns:
        bool: ``True`` only on an exact digest match.

    Raises:
        ContentReadError: If the file exists but cannot be read.
        OperationCancelledError: If ``cancel_token`` is cancelled mid-read.
    """

    try:
        actual = hash_file(path, algorithm, cancel_token=cancel_token)
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
        return False
    except OSError as exc:
        raise ContentReadError(path, exc.strerror or str(exc)) from exc
    return actual == expected_hash.lower()


__all__ = [
    "DEFAULT_ALGORITHM",
    "compute_digest",
    "digest_matches",
    "hash_file",
    "verify_file",
]
