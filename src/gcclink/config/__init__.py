"""Configuration modules for gcclink."""

from .ini_parser import LinkConfig, LinkConfigError, find_default_config
from .platform_policy import (
    PlatformPolicy,
    cxx_runtime_library,
    default_libraries,
    get_policy,
    safe_to_strip_dead_sections,
    supports_soname,
)
from .target import OS, Environment, TargetError, TargetPlatform

__all__ = [
    "LinkConfig",
    "LinkConfigError",
    "find_default_config",
    "PlatformPolicy",
    "get_policy",
    "default_libraries",
    "cxx_runtime_library",
    "supports_soname",
    "safe_to_strip_dead_sections",
    "OS",
    "Environment",
    "TargetError",
    "TargetPlatform",
]
