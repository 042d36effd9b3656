"""
distclean/osarch.py

Operating system and architecture pairs, written "os-arch" in output
directories and config files.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass

# Host platform names mapped onto the Go-style names used in output directories.
_OS_ALIASES: dict[str, str] = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
    "freebsd": "freebsd",
}

_ARCH_ALIASES: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
}


@dataclass(frozen=True, order=True)
class OSArch:
    """An operating system / architecture pair such as ``linux-amd64``."""

    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"

    @classmethod
    def parse(cls, value: str) -> OSArch:
        """Parse the canonical ``os-arch`` form."""
        parts = value.strip().split("-")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"failed to parse {value!r} as os-arch: expected exactly one '-'")
        return cls(os=parts[0], arch=parts[1])

    @classmethod
    def current(cls) -> OSArch:
        system = platform.system().lower()
        machine = platform.machine().lower()
        return cls(
            os=_OS_ALIASES.get(system, system),
            arch=_ARCH_ALIASES.get(machine, machine),
        )
