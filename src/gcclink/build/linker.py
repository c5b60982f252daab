"""
Linker command construction and execution.

This module turns a BuildRequest into the argument vector for the toolchain
driver (gcc/clang) or a plain linker, and runs it.

Argument order matters to linkers, so the builder appends in one fixed
sequence and never reorders what it already emitted:

    objects, profiling runtime, user libraries, -shared, -static, -o <out>,
    sanitizers, LTO, -fuse-ld, user switches, extra link switches,
    --gc-sections, default libraries (+ soname), target flags
"""

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from . import feature_flags
from .errors import LinkerError
from .path_resolver import PathResolver
from .request import BuildRequest, FullyStatic
from .switch_merger import merge_user_switches
from .tool_invoker import invoke, locate_toolchain_driver


@dataclass
class LinkResult:
    """Result of linking operation."""

    success: bool
    returncode: int
    tool: Optional[Path]
    args: List[str] = field(default_factory=list)
    output_path: Optional[Path] = None


class ArgsBuilder:
    """
    Builds link arguments for a gcc-compatible toolchain driver.

    An instance serves exactly one link: construct it from a BuildRequest,
    call build() once, and discard it.
    """

    def __init__(self, request: BuildRequest, resolver: Optional[PathResolver] = None):
        """
        Initialize args builder.

        Args:
            request: Link inputs and settings
            resolver: Path resolver for runtime library lookup
        """
        self.request = request
        self.resolver = resolver or PathResolver()
        self.args: List[str] = []
        self._built = False

    def build(self) -> List[str]:
        """
        Assemble the argument vector.

        Returns:
            Arguments for the driver (without the program name)

        Raises:
            LinkConfigurationError: If an explicitly requested file is missing
            LinkerError: If the builder was already used
        """
        if self._built:
            raise LinkerError("ArgsBuilder can only build once; create a new one per link")
        self._built = True

        request = self.request

        self.args.extend(request.object_files)

        # The profiling runtime must come before the libraries it depends on
        self.args.extend(feature_flags.profiling_flags(request, self.add_ld_flag))

        self.args.extend(request.library_files)

        if request.shared:
            self.args.append("-shared")

        if request.fully_static == FullyStatic.FORCE_STATIC:
            self.args.append("-static")

        self.args.extend(["-o", request.output_path])

        self.add_sanitizers()

        # Before user switches so users can pass extra options to the LTO plugin
        self.args.extend(feature_flags.lto_flags(request, self.resolver, self.add_ld_flag))

        self.add_linker()
        self.add_user_switches()

        self.args.extend(request.link_switches)

        self.args.extend(feature_flags.strip_dead_flags(request, self.add_ld_flag))

        self.args.extend(feature_flags.default_library_flags(request, self.add_ld_flag))

        self.add_target_flags()

        return self.args

    def add_sanitizers(self) -> None:
        self.args.extend(feature_flags.sanitizer_flags(self.request, self.resolver))

    def add_linker(self) -> None:
        """Select the linker binary used by the driver."""
        if self.request.linker:
            self.args.append(f"-fuse-ld={self.request.linker}")

    def add_user_switches(self) -> None:
        self.args.extend(
            merge_user_switches(self.request.linker_switches, self.request.cc_switches)
        )

    def add_target_flags(self) -> None:
        self.args.extend(feature_flags.target_flags(self.request))

    def add_ld_flag(self, *flags: str) -> List[str]:
        """Render linker-only flags (e.g., -Wl,-soname,libx.so.1)."""
        return feature_flags.driver_ld_flag(*flags)


class LdArgsBuilder(ArgsBuilder):
    """Builds link arguments for invoking a plain linker (ld) directly."""

    def add_sanitizers(self) -> None:
        pass

    def add_linker(self) -> None:
        pass

    def add_user_switches(self) -> None:
        if self.request.cc_switches:
            logging.warning("Ignoring -Xcc options when linking with plain ld")
        self.args.extend(switch.value for switch in self.request.linker_switches)

    def add_target_flags(self) -> None:
        pass

    def add_ld_flag(self, *flags: str) -> List[str]:
        return feature_flags.plain_ld_flag(*flags)


class Linker:
    """
    Links object files into an executable or shared library.

    Locates the toolchain driver, builds the command line for a request and
    runs it.
    """

    def __init__(
        self,
        request: BuildRequest,
        driver: Optional[str] = None,
        plain_ld: bool = False,
        resolver: Optional[PathResolver] = None
    ):
        """
        Initialize linker.

        Args:
            request: Link inputs and settings
            driver: Explicit driver name or path (default: $CC or gcc)
            plain_ld: Invoke ld directly instead of a compiler driver
            resolver: Path resolver for runtime library lookup
        """
        self.request = request
        self.driver = driver
        self.plain_ld = plain_ld
        self.resolver = resolver or PathResolver()

    def build_args(self) -> List[str]:
        """Build the argument vector for this request."""
        builder_class = LdArgsBuilder if self.plain_ld else ArgsBuilder
        return builder_class(self.request, self.resolver).build()

    def locate_tool(self) -> Path:
        return locate_toolchain_driver(self.driver, plain_ld=self.plain_ld)

    def link(self) -> LinkResult:
        """
        Link the request's inputs.

        Pre-flight problems (missing explicit files, missing driver) raise
        before any process is started. A failing link is reported through
        the result, with the driver's exit status untouched.

        Returns:
            LinkResult with the driver's exit status

        Raises:
            LinkConfigurationError: If an explicitly requested file is missing
            ToolNotFoundError: If the driver cannot be located
            ToolInvocationError: If the driver cannot be started
        """
        tool = self.locate_tool()
        args = self.build_args()

        logging.debug(f"Target: {self.request.target.triple}")
        logging.debug("Linking with: " + " ".join(shlex.quote(arg) for arg in args if arg))

        returncode = invoke(tool, args, verbose=self.request.verbose)

        return LinkResult(
            success=returncode == 0,
            returncode=returncode,
            tool=tool,
            args=args,
            output_path=Path(self.request.output_path),
        )


def link_obj_to_binary(
    request: BuildRequest,
    driver: Optional[str] = None,
    plain_ld: bool = False
) -> int:
    """
    Link a request and return the driver's exit status.

    Args:
        request: Link inputs and settings
        driver: Explicit driver name or path
        plain_ld: Invoke ld directly instead of a compiler driver

    Returns:
        Exit status of the driver process
    """
    return Linker(request, driver=driver, plain_ld=plain_ld).link().returncode
