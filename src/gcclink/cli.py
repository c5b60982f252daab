"""
Command-line interface for gcclink.

This module provides the `gcclink` CLI tool for linking object files with a
gcc-compatible toolchain driver.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from gcclink.build import (
    BuildRequest,
    FullyStatic,
    LinkerError,
    LtoMode,
    Linker,
    Sanitizer,
    driver_name,
    format_command_line,
)
from gcclink.cli_utils import (
    ErrorFormatter,
    TaggedSwitchAction,
    setup_logging,
)
from gcclink.config import LinkConfig, LinkConfigError, TargetError, TargetPlatform, find_default_config

LIBRARY_SUFFIXES = (".a", ".lib", ".so", ".dylib")


def split_inputs(inputs: List[str]):
    """Split input files into object files and library files by extension.

    Example:
        split_inputs(["main.o", "libfoo.a", "util.o"])
        # Returns: (['main.o', 'util.o'], ['libfoo.a'])
    """
    objects = []
    libraries = []
    for name in inputs:
        if name.endswith(LIBRARY_SUFFIXES) or ".so." in Path(name).name:
            libraries.append(name)
        else:
            objects.append(name)
    return objects, libraries


def load_config(config_path: Optional[Path]) -> Optional[LinkConfig]:
    """Load gcclink.ini from an explicit path or the current directory."""
    if config_path is not None:
        return LinkConfig(config_path)
    found = find_default_config(Path.cwd())
    return LinkConfig(found) if found else None


def build_request(parsed: argparse.Namespace, config: Optional[LinkConfig]) -> BuildRequest:
    """Create a BuildRequest from parsed arguments and optional config file.

    Command-line values take precedence over gcclink.ini values.

    Raises:
        TargetError: If the target triple is invalid
        ValueError: If a sanitizer name is unknown
        LinkConfigError: If the config file has invalid values
    """
    def from_config(value, key):
        if value is not None or config is None:
            return value
        return config.get(key)

    def bool_from_config(value, key):
        if value is not None:
            return value
        return config is not None and config.get_bool(key)

    triple = from_config(parsed.target, "target")
    if triple:
        target = TargetPlatform.from_triple(
            triple,
            cpu=parsed.mcpu,
            function_sections=parsed.function_sections,
            data_sections=parsed.data_sections,
        )
    else:
        host = TargetPlatform.host()
        target = TargetPlatform(
            os=host.os,
            environment=host.environment,
            arch=host.arch,
            cpu=parsed.mcpu,
            function_sections=parsed.function_sections,
            data_sections=parsed.data_sections,
        )

    sanitizer_names: List[str] = []
    if parsed.fsanitize is not None:
        for value in parsed.fsanitize:
            sanitizer_names.extend(value.split(","))
    elif config is not None:
        sanitizer_names.extend(config.get_list("sanitizers"))

    objects, libraries = split_inputs(parsed.inputs)
    libraries.extend(parsed.lib or [])

    lib_dir = from_config(parsed.lib_dir, "lib_dir")
    link_no_cpp = bool_from_config(parsed.link_no_cpp, "link_no_cpp")
    disable_strip_dead = bool_from_config(parsed.disable_linker_strip_dead, "disable_linker_strip_dead")

    return BuildRequest(
        output_path=parsed.output,
        target=target,
        object_files=tuple(objects),
        library_files=tuple(libraries),
        shared=parsed.shared,
        fully_static=parsed.fully_static,
        sanitizers=Sanitizer.parse_list(sanitizer_names),
        lto_mode=LtoMode(parsed.flto) if parsed.flto else LtoMode.OFF,
        lto_binary=from_config(parsed.flto_binary, "lto_binary"),
        profiling=parsed.fprofile_instr_generate,
        linker_switches=tuple(parsed.linker_switches or []),
        cc_switches=tuple(parsed.cc_switches or []),
        link_switches=tuple(parsed.link_switch or []),
        linker=from_config(parsed.linker, "linker"),
        lib_dir=Path(lib_dir) if lib_dir else None,
        link_no_cpp=link_no_cpp,
        disable_linker_strip_dead=disable_strip_dead,
        soname=from_config(parsed.soname, "soname"),
        optimization_level=parsed.optimize,
        verbose=parsed.verbose,
    )


def link_command(parsed: argparse.Namespace) -> None:
    """Link object files into an executable or shared library.

    Examples:
        gcclink main.o util.o -o app
        gcclink a.o --shared --soname libx.so.1 -o libx.so.1
        gcclink a.o -o app --fsanitize=address --flto=thin -O2
        gcclink a.o -o app -L--no-undefined -Xcc=-pthread
        gcclink a.o -o app --dry-run
    """
    setup_logging(parsed.verbose)

    try:
        config = load_config(parsed.config)
        request = build_request(parsed, config)
        driver = parsed.gcc or (config.get("gcc") if config else None)
        linker = Linker(request, driver=driver, plain_ld=parsed.plain_ld)

        if parsed.dry_run:
            args = linker.build_args()
            print(format_command_line(driver_name(driver, plain_ld=parsed.plain_ld), args))
            sys.exit(0)

        result = linker.link()

    except (LinkerError, LinkConfigError, TargetError, ValueError) as e:
        ErrorFormatter.handle_configuration_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except (FileNotFoundError, PermissionError) as e:
        ErrorFormatter.handle_configuration_error(e)
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, parsed.verbose)

    if result.success:
        if parsed.verbose:
            ErrorFormatter.print_success(f"Linked {request.output_path}")
    else:
        ErrorFormatter.print_error("Link failed!", f"{result.tool} exited with status {result.returncode}")
    sys.exit(result.returncode)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gcclink",
        description="Link object files through a gcc-compatible toolchain driver",
    )

    parser.add_argument(
        "inputs",
        nargs="+",
        help="Object files and library archives to link",
    )
    parser.add_argument(
        "-o",
        "--output",
        required=True,
        help="Output file path",
    )
    parser.add_argument(
        "--lib",
        action="append",
        default=None,
        help="Library file to link (repeatable)",
    )
    parser.add_argument(
        "--shared",
        action="store_true",
        help="Build a shared library",
    )
    parser.add_argument(
        "--static",
        dest="fully_static",
        action="store_const",
        const=FullyStatic.FORCE_STATIC,
        default=FullyStatic.UNSET,
        help="Create a fully static executable",
    )
    parser.add_argument(
        "--no-static",
        dest="fully_static",
        action="store_const",
        const=FullyStatic.FORCE_DYNAMIC,
        help="Never pass -static",
    )
    parser.add_argument(
        "--target",
        default=None,
        help="Target triple (default: host)",
    )
    parser.add_argument(
        "--mcpu",
        default=None,
        help="Target CPU name, passed to the LTO plugin",
    )
    parser.add_argument(
        "--function-sections",
        action="store_true",
        help="Objects were compiled with one section per function",
    )
    parser.add_argument(
        "--data-sections",
        action="store_true",
        help="Objects were compiled with one section per data object",
    )
    parser.add_argument(
        "-O",
        dest="optimize",
        type=int,
        default=0,
        help="Optimization level (LTO uses it clamped to 0-3)",
    )
    parser.add_argument(
        "--fsanitize",
        action="append",
        default=None,
        help="Sanitizers to link runtimes for: address, fuzzer, memory, thread",
    )
    parser.add_argument(
        "--flto",
        choices=[mode.value for mode in LtoMode if mode != LtoMode.OFF],
        default=None,
        help="Link-time optimization mode",
    )
    parser.add_argument(
        "--flto-binary",
        default=None,
        help="LTO plugin (LLVMgold.so) or libLTO.dylib to use",
    )
    parser.add_argument(
        "--fprofile-instr-generate",
        action="store_true",
        help="Link the profiling runtime",
    )
    parser.add_argument(
        "-L",
        "--linker-switch",
        dest="linker_switches",
        action=TaggedSwitchAction,
        default=None,
        help="Pass a switch to the linker (repeatable)",
    )
    parser.add_argument(
        "-Xcc",
        "--cc-switch",
        dest="cc_switches",
        action=TaggedSwitchAction,
        default=None,
        help="Pass a switch to the toolchain driver (repeatable)",
    )
    parser.add_argument(
        "--link-switch",
        action="append",
        default=None,
        help="Extra link switch appended after user switches (repeatable)",
    )
    parser.add_argument(
        "--linker",
        default=None,
        help="Linker to use, passed as -fuse-ld=<name>",
    )
    parser.add_argument(
        "--gcc",
        default=None,
        help="Toolchain driver to invoke (default: $CC or gcc)",
    )
    parser.add_argument(
        "--lib-dir",
        default=None,
        help="Directory containing bundled runtime libraries",
    )
    parser.add_argument(
        "--link-no-cpp",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Disable automatic linking with the C++ standard library",
    )
    parser.add_argument(
        "--disable-linker-strip-dead",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Do not garbage collect unused sections",
    )
    parser.add_argument(
        "--soname",
        default=None,
        help="Soname for shared libraries",
    )
    parser.add_argument(
        "--plain-ld",
        action="store_true",
        help="Invoke ld directly instead of a compiler driver",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file (default: ./gcclink.ini when present)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the link command without running it",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_intermixed_args(argv)
    link_command(parsed_args)


if __name__ == "__main__":
    main()
