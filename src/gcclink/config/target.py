"""Target platform descriptor.

This module describes the platform a link is performed for: operating
system, environment (C library / runtime flavour), CPU architecture and the
code generation options the linker needs to know about.

Targets are usually given as a triple (``arch-vendor-os[-environment]``),
e.g. ``x86_64-unknown-linux-gnu`` or ``aarch64-linux-android``, or detected
from the host.
"""

import platform
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TargetError(ValueError):
    """Raised when a target triple cannot be understood."""

    pass


class OS(Enum):
    """Operating systems the linker knows policies for."""

    LINUX = "linux"
    DARWIN = "darwin"
    MACOSX = "macosx"
    IOS = "ios"
    FREEBSD = "freebsd"
    NETBSD = "netbsd"
    OPENBSD = "openbsd"
    DRAGONFLY = "dragonfly"
    SOLARIS = "solaris"
    WINDOWS = "windows"
    UNKNOWN = "unknown"


class Environment(Enum):
    """Runtime environment of the target (last triple component)."""

    NONE = "none"
    GNU = "gnu"
    ANDROID = "android"
    MUSL = "musl"
    MSVC = "msvc"
    UNKNOWN = "unknown"


# Word size per architecture name as it appears in triples
ARCH_BITS = {
    "x86_64": 64,
    "amd64": 64,
    "i386": 32,
    "i486": 32,
    "i586": 32,
    "i686": 32,
    "x86": 32,
    "aarch64": 64,
    "arm64": 64,
    "aarch64_be": 64,
    "arm": 32,
    "armv6": 32,
    "armv7": 32,
    "armv7a": 32,
    "thumb": 32,
    "ppc": 32,
    "powerpc": 32,
    "ppc64": 64,
    "powerpc64": 64,
    "ppc64le": 64,
    "powerpc64le": 64,
    "sparc": 32,
    "sparcv9": 64,
    "sparc64": 64,
    "mips": 32,
    "mipsel": 32,
    "mips64": 64,
    "mips64el": 64,
    "riscv32": 32,
    "riscv64": 64,
    "nvptx": 32,
    "nvptx64": 64,
    "wasm32": 32,
    "wasm64": 64,
    "s390x": 64,
}

# Prefixes are matched with startswith() so versioned names like
# "freebsd12" or "solaris2.11" resolve too. Longer names come first.
_OS_PREFIXES = (
    ("linux", OS.LINUX),
    ("darwin", OS.DARWIN),
    ("macosx", OS.MACOSX),
    ("macos", OS.MACOSX),
    ("ios", OS.IOS),
    ("freebsd", OS.FREEBSD),
    ("netbsd", OS.NETBSD),
    ("openbsd", OS.OPENBSD),
    ("dragonfly", OS.DRAGONFLY),
    ("solaris", OS.SOLARIS),
    ("windows", OS.WINDOWS),
    ("win32", OS.WINDOWS),
    ("mingw32", OS.WINDOWS),
)

_ENV_PREFIXES = (
    ("android", Environment.ANDROID),
    ("musl", Environment.MUSL),
    ("gnu", Environment.GNU),
    ("msvc", Environment.MSVC),
)

_DARWIN_FAMILY = frozenset({OS.DARWIN, OS.MACOSX, OS.IOS})


def _match_prefix(component: str, table):
    for prefix, value in table:
        if component.startswith(prefix):
            return value
    return None


@dataclass(frozen=True)
class TargetPlatform:
    """Platform a link is performed for."""

    os: OS
    environment: Environment = Environment.NONE
    arch: str = "x86_64"
    cpu: Optional[str] = None
    function_sections: bool = False
    data_sections: bool = False

    @property
    def is_darwin(self) -> bool:
        return self.os in _DARWIN_FAMILY

    @property
    def is_windows_gnu(self) -> bool:
        """Windows with a POSIX compatibility layer (MinGW)."""
        return self.os == OS.WINDOWS and self.environment == Environment.GNU

    @property
    def is_64bit(self) -> bool:
        bits = ARCH_BITS.get(self.arch)
        if bits is None:
            return "64" in self.arch
        return bits == 64

    @property
    def compiler_rt_arch(self) -> str:
        """Arch name used in compiler runtime library file names."""
        return self.arch

    @property
    def triple(self) -> str:
        parts = [self.arch, "unknown", self.os.value]
        if self.environment not in (Environment.NONE, Environment.UNKNOWN):
            parts.append(self.environment.value)
        return "-".join(parts)

    @classmethod
    def from_triple(
        cls,
        triple: str,
        cpu: Optional[str] = None,
        function_sections: bool = False,
        data_sections: bool = False,
    ) -> "TargetPlatform":
        """Parse a target triple.

        Args:
            triple: Target triple (e.g., "x86_64-unknown-linux-gnu")
            cpu: Optional CPU name (e.g., "haswell")
            function_sections: Whether code is emitted into per-function sections
            data_sections: Whether data is emitted into per-object sections

        Returns:
            TargetPlatform for the triple

        Raises:
            TargetError: If the triple is empty

        Example:
            >>> TargetPlatform.from_triple("aarch64-linux-android").environment
            <Environment.ANDROID: 'android'>
        """
        parts = [p for p in triple.strip().lower().split("-") if p]
        if not parts:
            raise TargetError(f"Invalid target triple: '{triple}'")

        arch = parts[0]
        os_value = OS.UNKNOWN
        environment = Environment.NONE
        os_index = None

        for index, component in enumerate(parts[1:], start=1):
            match = _match_prefix(component, _OS_PREFIXES)
            if match is not None:
                os_value = match
                os_index = index
                break

        if os_index is not None:
            for component in parts[os_index + 1:]:
                match = _match_prefix(component, _ENV_PREFIXES)
                if match is not None:
                    environment = match
                    break
                environment = Environment.UNKNOWN

        # mingw32 implies the GNU environment
        if os_index is not None and parts[os_index].startswith("mingw32"):
            environment = Environment.GNU

        return cls(
            os=os_value,
            environment=environment,
            arch=arch,
            cpu=cpu,
            function_sections=function_sections,
            data_sections=data_sections,
        )

    @classmethod
    def host(cls) -> "TargetPlatform":
        """Detect the platform this process runs on."""
        system = platform.system().lower()
        machine = platform.machine().lower()

        if machine in ("amd64", "x86_64"):
            arch = "x86_64"
        elif machine in ("i386", "i686", "x86"):
            arch = "i686"
        elif machine in ("arm64", "aarch64"):
            arch = "aarch64"
        elif machine.startswith("arm"):
            arch = "arm"
        elif machine:
            arch = machine
        else:
            arch = "x86_64" if sys.maxsize > 2**32 else "i686"

        if system == "linux":
            libc = platform.libc_ver()[0]
            environment = Environment.GNU if libc == "glibc" else Environment.NONE
            return cls(os=OS.LINUX, environment=environment, arch=arch)
        if system == "darwin":
            return cls(os=OS.MACOSX, arch=arch)
        if system == "windows":
            return cls(os=OS.WINDOWS, environment=Environment.MSVC, arch=arch)

        os_value = _match_prefix(system, _OS_PREFIXES) or OS.UNKNOWN
        return cls(os=os_value, arch=arch)
