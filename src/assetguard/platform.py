# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Map the running interpreter's platform onto Mojang's OS and arch vocabulary."""

from __future__ import annotations

import platform as _platform
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Final

from .errors import UnsupportedPlatformError

ARCH_PLACEHOLDER: Final[str] = "${arch}"
_DARWIN_PLATFORM: Final[str] = "darwin"


class OperatingSystem(str, Enum):
    """Operating systems recognised by version descriptors."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"

    @property
    def mojang_key(self) -> str:
        """Return the key used for this OS in ``rules`` and ``natives`` maps."""

        return _MOJANG_OS_KEYS[self]

    @classmethod
    def from_sys_platform(cls, value: str) -> OperatingSystem:
        """Return the OS matching a ``sys.platform`` string.

        Raises:
            UnsupportedPlatformError: If ``value`` names an unsupported platform.
        """

        if value.startswith("win") or value == "cygwin":
            return cls.WINDOWS
        if value == _DARWIN_PLATFORM:
            return cls.MACOS
        if value.startswith("linux"):
            return cls.LINUX
        raise UnsupportedPlatformError(f"Unsupported operating system '{value}'", resource="os", identifier=value)


_MOJANG_OS_KEYS: Final[dict[OperatingSystem, str]] = {
    OperatingSystem.WINDOWS: "windows",
    OperatingSystem.MACOS: "osx",
    OperatingSystem.LINUX: "linux",
}


class Architecture(str, Enum):
    """CPU architectures with a classifier token."""

    X64 = "x64"
    X86 = "x86"
    ARM64 = "arm64"
    ARM32 = "arm32"

    @property
    def classifier_token(self) -> str:
        """Return the token substituted for ``${arch}`` in native classifiers."""

        return _ARCH_TOKENS[self]

    @classmethod
    def from_machine(cls, value: str) -> Architecture:
        """Return the architecture matching a ``platform.machine()`` string.

        Raises:
            UnsupportedPlatformError: If ``value`` names an unknown machine type.
        """

        normalized = value.strip().lower()
        try:
            return _MACHINE_ALIASES[normalized]
        except KeyError as exc:
            raise UnsupportedPlatformError(
                f"Unsupported architecture '{value}'", resource="arch", identifier=value
            ) from exc


_ARCH_TOKENS: Final[dict[Architecture, str]] = {
    Architecture.X64: "64",
    Architecture.X86: "32",
    Architecture.ARM64: "arm64",
    Architecture.ARM32: "arm32",
}

_MACHINE_ALIASES: Final[dict[str, Architecture]] = {
    "x86_64": Architecture.X64,
    "amd64": Architecture.X64,
    "x64": Architecture.X64,
    "i386": Architecture.X86,
    "i686": Architecture.X86,
    "x86": Architecture.X86,
    "ia32": Architecture.X86,
    "aarch64": Architecture.ARM64,
    "arm64": Architecture.ARM64,
    "armv7l": Architecture.ARM32,
    "armv8l": Architecture.ARM32,
    "arm": Architecture.ARM32,
}


@dataclass(frozen=True, slots=True)
class Platform:
    """Operating system and architecture pair used for library filtering."""

    os: OperatingSystem
    arch: Architecture
    os_version: str | None = None

    @classmethod
    def current(cls) -> Platform:
        """Detect the platform of the running interpreter."""

        os_kind = OperatingSystem.from_sys_platform(sys.platform)
        if os_kind is OperatingSystem.MACOS:
            version = _platform.mac_ver()[0]
        else:
            version = _platform.release()
        return cls(
            os=os_kind,
            arch=Architecture.from_machine(_platform.machine()),
            os_version=version or None,
        )

    def substitute_arch(self, classifier: str) -> str:
        """Replace the ``${arch}`` placeholder in ``classifier``."""

        return classifier.replace(ARCH_PLACEHOLDER, self.arch.classifier_token)


__all__ = ["ARCH_PLACEHOLDER", "Architecture", "OperatingSystem", "Platform"]
