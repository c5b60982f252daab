"""Link request model.

A BuildRequest captures everything one link needs: inputs, output, target
platform and the feature settings (sanitizers, LTO, profiling) decided by the
compiler before linking starts. It is immutable and owned by a single link.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

from ..config.target import TargetPlatform


class FullyStatic(Enum):
    """Tri-state fully-static link setting."""

    UNSET = "unset"
    FORCE_STATIC = "static"
    FORCE_DYNAMIC = "dynamic"


class LtoMode(Enum):
    """Link-time optimization mode."""

    OFF = "off"
    FULL = "full"
    THIN = "thin"


class Sanitizer(Enum):
    """Runtime instrumentation modes that need a support library."""

    ADDRESS = "address"
    FUZZER = "fuzzer"
    MEMORY = "memory"
    THREAD = "thread"

    @classmethod
    def parse_list(cls, names) -> FrozenSet["Sanitizer"]:
        """
        Parse sanitizer names (e.g., ["address", "fuzzer"]).

        Raises:
            ValueError: If a name is not a known sanitizer
        """
        result = set()
        for name in names:
            name = name.strip().lower()
            if not name:
                continue
            try:
                result.add(cls(name))
            except ValueError:
                valid = ", ".join(s.value for s in cls)
                raise ValueError(f"Unknown sanitizer '{name}' (expected one of: {valid})") from None
        return frozenset(result)


@dataclass(frozen=True)
class TaggedSwitch:
    """A user switch tagged with its position on the original command line."""

    position: int
    value: str


@dataclass(frozen=True)
class BuildRequest:
    """Inputs and settings for one link."""

    output_path: str
    target: TargetPlatform
    object_files: Tuple[str, ...] = ()
    library_files: Tuple[str, ...] = ()
    shared: bool = False
    fully_static: FullyStatic = FullyStatic.UNSET
    sanitizers: FrozenSet[Sanitizer] = field(default_factory=frozenset)
    lto_mode: LtoMode = LtoMode.OFF
    lto_binary: Optional[str] = None  # Explicit LTO plugin / libLTO path
    profiling: bool = False
    linker_switches: Tuple[TaggedSwitch, ...] = ()
    cc_switches: Tuple[TaggedSwitch, ...] = ()
    link_switches: Tuple[str, ...] = ()  # Extra switches declared by the compiler
    linker: Optional[str] = None  # Passed as -fuse-ld=<linker>
    lib_dir: Optional[Path] = None  # Runtime library directory of the driver
    link_no_cpp: bool = False
    disable_linker_strip_dead: bool = False
    soname: Optional[str] = None
    optimization_level: int = 0
    llvm_version: int = 1500  # major * 100 + minor
    verbose: bool = False

    def has_sanitizer(self, sanitizer: Sanitizer) -> bool:
        return sanitizer in self.sanitizers

    def lib_path(self, name: str) -> Optional[Path]:
        """Path of a file in the runtime library directory, if one is known."""
        if self.lib_dir is None:
            return None
        return Path(self.lib_dir) / name
