# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Minimal HTTP client used to fetch manifests and indexes."""

from __future__ import annotations

import logging
import ssl
import urllib.error
import urllib.request
from typing import Final, Protocol
from urllib.parse import urlparse

from .cancellation import CancellationToken, check_cancelled
from .config import HttpConfig
from .errors import NetworkUnavailableError

LOGGER = logging.getLogger(__name__)

_SUPPORTED_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})


class HttpClient(Protocol):
    """Fetch the raw body of a URL."""

    def fetch(self, url: str, *, cancel_token: CancellationToken | None = None) -> bytes:
        """Return the response body for ``url``.

        Raises:
            NetworkUnavailableError: If the request cannot be completed.
            OperationCancelledError: If ``cancel_token`` is cancelled mid-transfer.
        """
        ...


class UrllibHttpClient:
    """:class:`HttpClient` backed by :mod:`urllib.request`."""

    def __init__(self, config: HttpConfig | None = None) -> None:
        self._config = config or HttpConfig()
        self._opener = urllib.request.build_opener(
            urllib.request.HTTPSHandler(context=ssl.create_default_context()),
        )

    @property
    def config(self) -> HttpConfig:
        return self._config

    def fetch(self, url: str, *, cancel_token: CancellationToken | None = None) -> bytes:
        parsed = urlparse(url)
        if parsed.scheme.lower() not in _SUPPORTED_SCHEMES:
            raise NetworkUnavailableError(
                f"Unsupported download scheme '{parsed.scheme}' for {url}", resource="url", identifier=url
            )
        check_cancelled(cancel_token)
        request = urllib.request.Request(url, headers={"User-Agent": self._config.user_agent})
        LOGGER.debug("GET %s", url)
        try:
            with self._opener.open(request, timeout=self._config.timeout_seconds) as response:
                chunks: list[bytes] = []
                while chunk := response.read(self._config.chunk_size):
                    check_cancelled(cancel_token)
                    chunks.append(chunk)
        except urllib.error.HTTPError as exc:
            raise NetworkUnavailableError(
                f"HTTP {exc.code} while fetching {url}", resource="url", identifier=url
            ) from exc
        except OSError as exc:
            reason = getattr(exc, "reason", exc)
            raise NetworkUnavailableError(
                f"Unable to fetch {url}: {reason}", resource="url", identifier=url
            ) from exc
        return b"".join(chunks)


__all__ = ["HttpClient", "UrllibHttpClient"]
