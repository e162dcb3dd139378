# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Cooperative cancellation shared by network fetches and hash verification."""

from __future__ import annotations

from threading import Event

from .errors import OperationCancelledError


class CancellationToken:
    """Thread-safe flag polled by long running operations."""

    def __init__(self) -> None:
        self._event = Event()

    def cancel(self) -> None:
        """Request cancellation of every operation observing this token."""

        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return ``True`` once :meth:`cancel` has been called."""

        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise :class:`OperationCancelledError` when cancellation was requested.

        Raises:
            OperationCancelledError: If the token has been cancelled.
        """

        if self._event.is_set():
            raise OperationCancelledError("Operation cancelled")


def check_cancelled(token: CancellationToken | None) -> None:
    """Raise when ``token`` is present and cancelled."""

    if token is not None:
        token.raise_if_cancelled()


__all__ = ["CancellationToken", "check_cancelled"]
