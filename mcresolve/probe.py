"""Probe of the running platform, giving the OS name, version and architecture as they
are named in version metadata rules.
"""

import platform

from typing import Optional


class PlatformInfo:
    """Read-only description of a platform: OS name ('linux', 'windows', 'osx' or 
    'freebsd'), OS version string matched by rules' version patterns, and processor's
    architecture ('x86', 'x86_64', 'arm64' or 'arm32').
    """

    __slots__ = "os_name", "os_version", "arch"

    def __init__(self, os_name: str, os_version: str = "", arch: str = "") -> None:
        self.os_name = os_name
        self.os_version = os_version
        self.arch = arch

    @classmethod
    def current(cls) -> "PlatformInfo":
        """Probe the platform running this interpreter.
        """
        return cls(minecraft_os or "", platform.version(), minecraft_arch or "")

    @property
    def arch_bits(self) -> Optional[int]:
        """Pointer width of the architecture, used to expand '${arch}' in natives.
        """
        return {
            "x86": 32,
            "arm32": 32,
            "x86_64": 64,
            "arm64": 64,
        }.get(self.arch)

    def __eq__(self, other) -> bool:
        return isinstance(other, PlatformInfo) and \
            (self.os_name, self.os_version, self.arch) == (other.os_name, other.os_version, other.arch)

    def __hash__(self) -> int:
        return hash((self.os_name, self.os_version, self.arch))

    def __repr__(self) -> str:
        return f"<PlatformInfo {self.os_name} {self.arch} {self.os_version!r}>"


# Name of the OS has used by Minecraft.
minecraft_os = {
    "Linux": "linux", 
    "Windows": "windows", 
    "Darwin": "osx",
    "FreeBSD": "freebsd"
}.get(platform.system())

# Name of the processor's architecture has used by Minecraft.
minecraft_arch = {
    "i386": "x86",
    "i686": "x86",
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "armv7l": "arm32",
    "armv6l": "arm32",
}.get(platform.machine().lower())
