# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parallel verification of expanded artifacts against the local cache."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path

from .cancellation import CancellationToken, check_cancelled
from .config import default_parallel_jobs
from .errors import ContentReadError
from .expander import ExpandedArtifacts
from .models import ArtifactCategory, ResolvedArtifact, ValidationResult
from .verify import DEFAULT_ALGORITHM, verify_file

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
_VerificationKey = tuple[Path, str, str]


class ValidationDriver:
    """Verify every artifact and report those that must be (re)fetched."""

    def __init__(
        self,
        *,
        jobs: int | None = None,
        algorithm: str = DEFAULT_ALGORITHM,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        self._jobs = jobs or default_parallel_jobs()
        self._algorithm = algorithm
        self._cancel_token = cancel_token

    def validate(
        self,
        expanded: ExpandedArtifacts,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> ValidationResult:
        """Return the artifacts of ``expanded`` whose local copy is missing or wrong.

        Identical ``(path, hash)`` pairs (several asset names sharing one object)
        are hashed once but every referencing artifact is reported.

        Args:
            expanded: Artifacts enumerated from the descriptor.
            on_progress: Optional callback receiving ``(completed, total)`` after
                each unique file verification.

        Returns:
            ValidationResult: Failing artifacts grouped by category.

        Raises:
            OperationCancelledError: If the cancellation token fires mid-run.
        """

        candidates = list(expanded.candidates())
        keys = {self._key(candidate.artifact) for candidate in candidates}
        outcomes = self._verify_all(keys, on_progress)

        grouped: dict[ArtifactCategory, list[ResolvedArtifact]] = {category: [] for category in ArtifactCategory}
        for candidate in candidates:
            if not outcomes[self._key(candidate.artifact)]:
                grouped[candidate.category].append(candidate.artifact)
        return ValidationResult(**{category.value: tuple(items) for category, items in grouped.items()})

    def _key(self, artifact: ResolvedArtifact) -> _VerificationKey:
        return (artifact.path, self._algorithm, artifact.hash.lower())

    def _verify_all(
        self,
        keys: set[_VerificationKey],
        on_progress: ProgressCallback | None,
    ) -> dict[_VerificationKey, bool]:
        check_cancelled(self._cancel_token)
        outcomes: dict[_VerificationKey, bool] = {}
        total = len(keys)
        if not total:
            return outcomes
        executor = ThreadPoolExecutor(max_workers=min(self._jobs, total))
        try:
            future_map: dict[Future[bool], _VerificationKey] = {
                executor.submit(self._verify_one, key): key for key in keys
            }
            for future in as_completed(future_map):
                outcomes[future_map[future]] = future.result()
                if on_progress is not None:
                    on_progress(len(outcomes), total)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)
        check_cancelled(self._cancel_token)
        return outcomes

    def _verify_one(self, key: _VerificationKey) -> bool:
        check_cancelled(self._cancel_token)
        path, algorithm, expected = key
        try:
            return verify_file(path, algorithm, expected, cancel_token=self._cancel_token)
        except ContentReadError as exc:
            LOGGER.warning("%s; marking for download", exc)
            return False


__all__ = ["ProgressCallback", "ValidationDriver"]
