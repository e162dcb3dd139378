# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""In-memory fakes and a fully hashed sample version shared by the tests."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from assetguard.cancellation import CancellationToken, check_cancelled
from assetguard.errors import NetworkUnavailableError
from assetguard.paths import CacheLayout
from assetguard.platform import Architecture, OperatingSystem, Platform

MANIFEST_URL = "https://launchermeta.mojang.com/mc/game/version_manifest.json"
ASSET_BASE_URL = "https://resources.download.minecraft.net"
VERSION_ID = "1.16.5"
LINUX_X64 = Platform(os=OperatingSystem.LINUX, arch=Architecture.X64)


def sha1(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


def encode(document: Any) -> bytes:
    return json.dumps(document, indent=2).encode("utf-8")


class FakeHttpClient:
    """In-memory stand-in for :class:`assetguard.http.UrllibHttpClient`."""

    def __init__(self, responses: dict[str, bytes] | None = None) -> None:
        self.responses: dict[str, bytes] = dict(responses or {})
        self.requests: list[str] = []
        self.online = True

    def fetch(self, url: str, *, cancel_token: CancellationToken | None = None) -> bytes:
        self.requests.append(url)
        check_cancelled(cancel_token)
        if not self.online or url not in self.responses:
            raise NetworkUnavailableError(f"Unable to fetch {url}: offline", resource="url", identifier=url)
        return self.responses[url]


@dataclass
class GameVersion:
    """A complete, internally consistent version with every artifact body."""

    version_id: str = VERSION_ID
    client_jar: bytes = b"client jar bytes"
    log_config: bytes = b"<Configuration/>"
    brigadier: bytes = b"brigadier jar"
    lwjgl_linux: bytes = b"lwjgl natives linux"
    lwjgl_windows: bytes = b"lwjgl natives windows 64"
    assets: dict[str, bytes] = field(
        default_factory=lambda: {
            "icons/icon_16x16.png": b"icon-16",
            "icons/icon_copy.png": b"icon-16",
            "minecraft/sounds/ambient/cave/cave1.ogg": b"cave sound",
        }
    )

    @property
    def asset_index(self) -> dict[str, Any]:
        return {"objects": {name: {"hash": sha1(body), "size": len(body)} for name, body in self.assets.items()}}

    @property
    def asset_index_bytes(self) -> bytes:
        return encode(self.asset_index)

    @property
    def asset_index_url(self) -> str:
        return f"https://launchermeta.mojang.com/v1/packages/{sha1(self.asset_index_bytes)}/1.16.json"

    def _library(self, path: str, body: bytes) -> dict[str, Any]:
        return {
            "path": path,
            "sha1": sha1(body),
            "size": len(body),
            "url": f"https://libraries.minecraft.net/{path}",
        }

    @property
    def descriptor(self) -> dict[str, Any]:
        return {
            "id": self.version_id,
            "type": "release",
            "assetIndex": {
                "id": "1.16",
                "sha1": sha1(self.asset_index_bytes),
                "size": len(self.asset_index_bytes),
                "totalSize": sum(len(body) for body in self.assets.values()),
                "url": self.asset_index_url,
            },
            "libraries": [
                {
                    "name": "com.mojang:brigadier:1.0.17",
                    "downloads": {
                        "artifact": self._library("com/mojang/brigadier/1.0.17/brigadier-1.0.17.jar", self.brigadier)
                    },
                },
                {
                    "name": "org.lwjgl.lwjgl:lwjgl-platform:2.9.4",
                    "natives": {
                        "linux": "natives-linux",
                        "osx": "natives-osx",
                        "windows": "natives-windows-${arch}",
                    },
                    "downloads": {
                        "classifiers": {
                            "natives-linux": self._library(
                                "org/lwjgl/lwjgl-platform-2.9.4-natives-linux.jar", self.lwjgl_linux
                            ),
                            "natives-windows-64": self._library(
                                "org/lwjgl/lwjgl-platform-2.9.4-natives-windows-64.jar", self.lwjgl_windows
                            ),
                        }
                    },
                },
                {
                    "name": "ca.weblite:java-objc-bridge:1.0.0",
                    "rules": [{"action": "allow", "os": {"name": "osx"}}],
                    "downloads": {"artifact": {"path": "broken"}},
                },
            ],
            "downloads": {
                "client": {
                    "sha1": sha1(self.client_jar),
                    "size": len(self.client_jar),
                    "url": f"https://launcher.mojang.com/v1/objects/{sha1(self.client_jar)}/client.jar",
                }
            },
            "logging": {
                "client": {
                    "argument": "-Dlog4j.configurationFile=${path}",
                    "type": "log4j2-xml",
                    "file": {
                        "id": "client-1.12.xml",
                        "sha1": sha1(self.log_config),
                        "size": len(self.log_config),
                        "url": f"https://launcher.mojang.com/v1/objects/{sha1(self.log_config)}/client-1.12.xml",
                    },
                }
            },
        }

    @property
    def descriptor_bytes(self) -> bytes:
        return encode(self.descriptor)

    @property
    def descriptor_url(self) -> str:
        return f"https://launchermeta.mojang.com/v1/packages/{sha1(self.descriptor_bytes)}/{self.version_id}.json"

    def manifest(self, url: str | None = None) -> dict[str, Any]:
        return {
            "latest": {"release": self.version_id, "snapshot": self.version_id},
            "versions": [
                {"id": self.version_id, "type": "release", "url": url or self.descriptor_url},
                {"id": "1.16.4", "type": "release", "url": "https://launchermeta.mojang.com/v1/packages/aa/1.16.4.json"},
            ],
        }

    def responses(self) -> dict[str, bytes]:
        return {
            MANIFEST_URL: encode(self.manifest()),
            self.descriptor_url: self.descriptor_bytes,
            self.asset_index_url: self.asset_index_bytes,
        }

    def artifact_bodies(self, layout: CacheLayout) -> dict[Path, bytes]:
        """Return the on-disk location and body of every Linux artifact."""

        bodies = {
            layout.version_jar_path(self.version_id): self.client_jar,
            layout.log_config_path("client-1.12.xml"): self.log_config,
            layout.library_path("com/mojang/brigadier/1.0.17/brigadier-1.0.17.jar"): self.brigadier,
            layout.library_path("org/lwjgl/lwjgl-platform-2.9.4-natives-linux.jar"): self.lwjgl_linux,
        }
        for body in self.assets.values():
            bodies[layout.asset_object_path(sha1(body))] = body
        return bodies

    def install(self, layout: CacheLayout) -> None:
        """Write every Linux artifact with valid contents."""

        for path, body in self.artifact_bodies(layout).items():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(body)
