"""
Platform link policies.

This module centralizes what the linker adds on its own for each target
platform: default system libraries, the C++ runtime library, whether a
shared-object soname may be set, and whether unused sections may be
garbage collected.

Platforms not listed here get no defaults at all, leaving the user to pass
everything explicitly.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .target import OS, Environment, TargetPlatform


@dataclass(frozen=True)
class PlatformPolicy:
    """Link defaults for one (OS, environment) combination."""

    default_libraries: Tuple[str, ...] = ()
    cxx_runtime: Optional[str] = None  # e.g. "-lstdc++"
    supports_soname: bool = False


NEUTRAL_POLICY = PlatformPolicy()

_DARWIN_POLICY = PlatformPolicy(
    default_libraries=("-ldl", "-lpthread", "-lm"),
    cxx_runtime="-lc++",
    supports_soname=True,
)

_BSD_POLICY = PlatformPolicy(
    default_libraries=("-lpthread", "-lm"),
    cxx_runtime="-lstdc++",
    supports_soname=True,
)

# Keyed by (OS, Environment); None matches any environment of that OS
POLICIES = {
    (OS.LINUX, Environment.ANDROID): PlatformPolicy(
        default_libraries=("-ldl", "-lm"),
        cxx_runtime="-lc++",
        supports_soname=True,
    ),
    (OS.LINUX, None): PlatformPolicy(
        default_libraries=("-lrt", "-ldl", "-lpthread", "-lm"),
        cxx_runtime="-lstdc++",
        supports_soname=True,
    ),
    (OS.DARWIN, None): _DARWIN_POLICY,
    (OS.MACOSX, None): _DARWIN_POLICY,
    (OS.FREEBSD, None): PlatformPolicy(
        default_libraries=("-lpthread", "-lm"),
        cxx_runtime="-lc++",
        supports_soname=True,
    ),
    (OS.NETBSD, None): _BSD_POLICY,
    (OS.OPENBSD, None): _BSD_POLICY,
    (OS.DRAGONFLY, None): _BSD_POLICY,
    (OS.SOLARIS, None): PlatformPolicy(
        default_libraries=("-lm", "-lumem", "-lsocket", "-lnsl"),
        cxx_runtime="-lstdc++",
        supports_soname=False,
    ),
}

# Winsock, needed by MinGW programs using sockets
WINDOWS_GNU_EXTRA_LIBRARIES = ("-lws2_32",)

# The only OS family whose default linker handles --gc-sections safely
_STRIP_DEAD_SECTIONS_OS = frozenset({OS.LINUX})


def get_policy(target: TargetPlatform) -> PlatformPolicy:
    """
    Get the link policy for a target.

    Args:
        target: Target platform

    Returns:
        Matching PlatformPolicy, or NEUTRAL_POLICY for unknown platforms
    """
    policy = POLICIES.get((target.os, target.environment))
    if policy is None:
        policy = POLICIES.get((target.os, None), NEUTRAL_POLICY)
    return policy


def default_libraries(target: TargetPlatform) -> List[str]:
    """Get the system libraries linked by default, in link order."""
    libs = list(get_policy(target).default_libraries)
    if target.is_windows_gnu:
        libs.extend(WINDOWS_GNU_EXTRA_LIBRARIES)
    return libs


def cxx_runtime_library(target: TargetPlatform) -> Optional[str]:
    """Get the link argument for the C++ standard library, if known."""
    return get_policy(target).cxx_runtime


def supports_soname(target: TargetPlatform) -> bool:
    return get_policy(target).supports_soname


def safe_to_strip_dead_sections(target: TargetPlatform, profiling_enabled: bool) -> bool:
    """
    Check whether unreferenced sections may be garbage collected.

    Profiling runtimes keep their data in specially named sections that
    older linkers drop with --gc-sections, so stripping is never safe for
    instrumented binaries.

    Args:
        target: Target platform
        profiling_enabled: Whether profiling instrumentation is linked in

    Returns:
        True if --gc-sections may be passed
    """
    if profiling_enabled:
        return False
    return target.os in _STRIP_DEAD_SECTIONS_OS
