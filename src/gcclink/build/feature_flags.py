"""Feature link flags.

Each function here looks at a BuildRequest and returns the link arguments
one feature needs (sanitizers, LTO, profiling, section stripping, default
libraries, target flags). They never mutate anything; the args builder
decides where in the command line the result goes.

Flags meant for the linker itself are rendered through an ``ld_flag``
callable so the same logic serves both the toolchain driver (``-Wl,a,b``)
and a plain linker (``a b``).
"""

import sys
from pathlib import Path
from typing import Callable, List, Optional

from ..config import platform_policy
from ..config.target import OS
from .errors import LinkConfigurationError
from .path_resolver import CandidateLibrary, PathResolver
from .request import BuildRequest, LtoMode, Sanitizer

LdFlag = Callable[..., List[str]]

# File name prefix of runtime libraries shipped with gcclink
BUNDLED_RT_PREFIX = "libgcclink_rt"
UPSTREAM_RT_PREFIX = "libclang_rt"
BUNDLED_GOLD_PLUGIN = "LLVMgold-gcclink.so"
BUNDLED_LTO_DYLIB = "libLTO-gcclink.dylib"
PROFILE_RT_LIBRARY = "-lgcclink-profile-rt"
PROFILE_RUNTIME_HOOK = "__llvm_profile_runtime"

# Targets whose linker is assumed to be ld.gold or ld.bfd with plugin support
GOLD_PLUGIN_OS = frozenset({OS.LINUX, OS.FREEBSD, OS.NETBSD, OS.OPENBSD, OS.DRAGONFLY})

MAX_LTO_OPT_LEVEL = 3


def driver_ld_flag(*flags: str) -> List[str]:
    """Forward linker flags through the toolchain driver as one -Wl, group."""
    return ["-Wl," + ",".join(flags)]


def plain_ld_flag(*flags: str) -> List[str]:
    """Pass linker flags as separate arguments."""
    return list(flags)


def compiler_rt_lib_path(request: BuildRequest, name: str, shared: bool = False) -> Optional[Path]:
    """
    Get the full path of a compiler runtime library in the lib dir.

    Args:
        request: Build request
        name: Library base name (e.g., "libclang_rt.asan")
        shared: Whether the shared variant is wanted

    Returns:
        Path with arch suffix and extension, or None without a lib dir

    Example:
        "libclang_rt.fuzzer" -> <lib_dir>/libclang_rt.fuzzer_osx.a on Darwin,
        <lib_dir>/libclang_rt.fuzzer-x86_64.a elsewhere
    """
    if request.target.is_darwin:
        suffix = "_osx_dynamic.dylib" if shared else "_osx.a"
        return request.lib_path(f"{name}{suffix}")
    ext = ".so" if shared else ".a"
    return request.lib_path(f"{name}-{request.target.compiler_rt_arch}{ext}")


# ---------------------------------------------------------------------------
# Sanitizers
# ---------------------------------------------------------------------------


def cxx_stdlib_flags(request: BuildRequest) -> List[str]:
    """Link flags for the C++ standard library, unless disabled."""
    if request.link_no_cpp:
        return []
    lib = platform_policy.cxx_runtime_library(request.target)
    return [lib] if lib else []


def asan_flags(request: BuildRequest, resolver: PathResolver) -> List[str]:
    """
    AddressSanitizer runtime flags.

    Darwin only ships the shared runtime; everywhere else the static archive
    is linked. Falls back to -fsanitize=address (handled by the driver) when
    no runtime is found.
    """
    link_shared = request.target.is_darwin
    library = CandidateLibrary(
        name="AddressSanitizer runtime",
        candidates=(
            compiler_rt_lib_path(request, f"{BUNDLED_RT_PREFIX}.asan", link_shared),
            compiler_rt_lib_path(request, f"{UPSTREAM_RT_PREFIX}.asan", link_shared),
        ),
    )

    path = library.resolve(resolver)
    if path is None:
        return ["-fsanitize=address"]

    args = [str(path)]
    if link_shared:
        # Runtime copied next to the executable, or used from where it was found
        args.extend(["-rpath", "@executable_path"])
        args.extend(["-rpath", str(path.parent)])
    return args


def fuzz_flags(request: BuildRequest, resolver: PathResolver) -> List[str]:
    """libFuzzer flags; empty when the runtime is not installed."""
    if request.llvm_version >= 600:
        candidates = (
            compiler_rt_lib_path(request, f"{BUNDLED_RT_PREFIX}.fuzzer"),
            compiler_rt_lib_path(request, f"{UPSTREAM_RT_PREFIX}.fuzzer"),
        )
    else:
        candidates = (
            request.lib_path("libFuzzer.a"),
            request.lib_path("libLLVMFuzzer.a"),
        )

    path = CandidateLibrary(name="libFuzzer", candidates=candidates).resolve(resolver)
    if path is None:
        return []

    # libFuzzer is written in C++
    return [str(path)] + cxx_stdlib_flags(request)


def sanitizer_flags(request: BuildRequest, resolver: PathResolver) -> List[str]:
    """All sanitizer link flags, in a fixed order."""
    args: List[str] = []
    if request.has_sanitizer(Sanitizer.ADDRESS):
        args.extend(asan_flags(request, resolver))
    if request.has_sanitizer(Sanitizer.FUZZER):
        args.extend(fuzz_flags(request, resolver))
    if request.has_sanitizer(Sanitizer.MEMORY):
        args.append("-fsanitize=memory")
    if request.has_sanitizer(Sanitizer.THREAD):
        args.append("-fsanitize=thread")
    return args


# ---------------------------------------------------------------------------
# Link-time optimization
# ---------------------------------------------------------------------------


def _explicit_lto_binary(request: BuildRequest, resolver: PathResolver) -> Optional[Path]:
    if not request.lto_binary:
        return None
    if not resolver.exists(request.lto_binary):
        raise LinkConfigurationError(f"--flto-binary: file '{request.lto_binary}' not found")
    return Path(request.lto_binary)


def gold_plugin_candidates(request: BuildRequest) -> List[Optional[Path]]:
    """Search order for the LLVMgold.so linker plugin."""
    host_64bit = sys.maxsize > 2**32
    candidates: List[Optional[Path]] = [
        request.lib_path(BUNDLED_GOLD_PLUGIN),
        # Perhaps the user copied the plugin to the lib dir
        request.lib_path("LLVMgold.so"),
    ]
    if host_64bit:
        candidates.append(Path("/usr/local/lib64/LLVMgold.so"))
    candidates.append(Path("/usr/local/lib/LLVMgold.so"))
    if host_64bit:
        candidates.append(Path("/usr/lib64/LLVMgold.so"))
    candidates.append(Path("/usr/lib/LLVMgold.so"))
    candidates.append(Path("/usr/lib/bfd-plugins/LLVMgold.so"))
    return candidates


def gold_plugin_path(request: BuildRequest, resolver: PathResolver) -> Path:
    """
    Get the LTO linker plugin path.

    Raises:
        LinkConfigurationError: If the plugin cannot be found
    """
    explicit = _explicit_lto_binary(request, resolver)
    if explicit is not None:
        return explicit

    library = CandidateLibrary(name="LLVMgold.so", candidates=tuple(gold_plugin_candidates(request)))
    path = library.resolve(resolver)
    if path is None:
        raise LinkConfigurationError(
            "The LLVMgold.so plugin (needed for LTO) was not found. "
            + "You can specify its path with --flto-binary=<file>."
        )
    return path


def lto_dylib_path(request: BuildRequest, resolver: PathResolver) -> Optional[Path]:
    """Get libLTO.dylib for Darwin; None lets the system linker use its own."""
    explicit = _explicit_lto_binary(request, resolver)
    if explicit is not None:
        return explicit
    library = CandidateLibrary(name="libLTO.dylib", candidates=(request.lib_path(BUNDLED_LTO_DYLIB),))
    return library.resolve(resolver)


def gold_plugin_flags(request: BuildRequest, resolver: PathResolver, ld_flag: LdFlag) -> List[str]:
    args = ld_flag("-plugin", str(gold_plugin_path(request, resolver)))

    if request.lto_mode == LtoMode.THIN:
        args += ld_flag("-plugin-opt=thinlto")

    cpu = request.target.cpu
    if cpu:
        args += ld_flag(f"-plugin-opt=mcpu={cpu}")

    opt_level = min(max(request.optimization_level, 0), MAX_LTO_OPT_LEVEL)
    args += ld_flag(f"-plugin-opt=O{opt_level}")

    if request.llvm_version >= 400:
        if request.target.function_sections:
            args += ld_flag("-plugin-opt=-function-sections")
        if request.target.data_sections:
            args += ld_flag("-plugin-opt=-data-sections")

    return args


def darwin_lto_flags(request: BuildRequest, resolver: PathResolver) -> List[str]:
    path = lto_dylib_path(request, resolver)
    if path is None:
        return []
    return ["-lto_library", str(path)]


def lto_flags(request: BuildRequest, resolver: PathResolver, ld_flag: LdFlag) -> List[str]:
    """
    LTO link flags.

    Args:
        request: Build request
        resolver: Path resolver for plugin lookup
        ld_flag: Renders linker-only flags for the active builder

    Returns:
        Link arguments (empty when LTO is off or unsupported on the target)

    Raises:
        LinkConfigurationError: If an explicit plugin path does not exist, or
            no gold plugin can be found where one is required
    """
    if request.lto_mode == LtoMode.OFF:
        return []

    # An explicit plugin must exist regardless of the target
    _explicit_lto_binary(request, resolver)

    if request.target.os in GOLD_PLUGIN_OS:
        return gold_plugin_flags(request, resolver, ld_flag)
    if request.target.is_darwin:
        return darwin_lto_flags(request, resolver)
    return []


# ---------------------------------------------------------------------------
# Profiling, section stripping, default libraries, target flags
# ---------------------------------------------------------------------------


def profiling_flags(request: BuildRequest, ld_flag: LdFlag) -> List[str]:
    """Profile runtime flags; must precede the user libraries."""
    if not request.profiling:
        return []
    args: List[str] = []
    if request.target.os == OS.LINUX:
        # Pulls in the runtime's initialization object
        args += ld_flag("-u", PROFILE_RUNTIME_HOOK)
    args.append(PROFILE_RT_LIBRARY)
    return args


def strip_dead_flags(request: BuildRequest, ld_flag: LdFlag) -> List[str]:
    if request.disable_linker_strip_dead:
        return []
    if not platform_policy.safe_to_strip_dead_sections(request.target, request.profiling):
        return []
    return ld_flag("--gc-sections")


def default_library_flags(request: BuildRequest, ld_flag: LdFlag) -> List[str]:
    """System libraries for the target, plus -soname for shared libraries."""
    args = platform_policy.default_libraries(request.target)
    if request.shared and request.soname and platform_policy.supports_soname(request.target):
        args += ld_flag("-soname", request.soname)
    return args


# Architectures whose gcc accepts -m32 / -m64
_M32_M64_ARCHES = frozenset({
    "x86_64", "amd64", "i386", "i486", "i586", "i686", "x86",
    "ppc", "powerpc", "ppc64", "powerpc64", "ppc64le", "powerpc64le",
    "sparc", "sparcv9", "sparc64",
    "nvptx", "nvptx64",
})

_MIPS_ARCHES = frozenset({"mips", "mipsel", "mips64", "mips64el"})


def target_flags(request: BuildRequest) -> List[str]:
    """Word-size / ABI selection flags for the toolchain driver."""
    arch = request.target.arch
    if arch in _M32_M64_ARCHES:
        return ["-m64" if request.target.is_64bit else "-m32"]
    if arch in _MIPS_ARCHES:
        return ["-mabi=64" if request.target.is_64bit else "-mabi=32"]
    return []
