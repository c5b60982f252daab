"""Toolchain driver location and execution.

The link itself is delegated to an external program (gcc, clang or ld). This
module finds that program and runs it synchronously with the assembled
arguments, returning its exit status untouched.
"""

import logging
import os
import platform
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from ..interrupt_utils import handle_keyboard_interrupt_properly, terminate_process_tree
from .errors import ToolInvocationError, ToolNotFoundError


def default_driver_name(plain_ld: bool = False) -> str:
    """Program name used when nothing else selects the driver."""
    if plain_ld:
        return "ld"
    # clang is the system compiler on FreeBSD
    if platform.system().lower() == "freebsd":
        return "clang"
    return "gcc"


def driver_name(
    override: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    plain_ld: bool = False,
) -> str:
    """Driver name or path to run, before any PATH lookup.

    Lookup order: explicit override, then the CC (or LD for plain ld)
    environment variable, then the default program name.
    """
    if environ is None:
        environ = os.environ

    env_var = "LD" if plain_ld else "CC"
    return override or environ.get(env_var) or default_driver_name(plain_ld)


def locate_toolchain_driver(
    override: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    plain_ld: bool = False,
) -> Path:
    """
    Locate the toolchain driver executable.

    The name comes from driver_name(); names without a directory are
    searched on PATH.

    Args:
        override: Explicit driver name or path
        environ: Environment to read (defaults to os.environ)
        plain_ld: Whether a plain linker is wanted instead of a driver

    Returns:
        Path to the executable

    Raises:
        ToolNotFoundError: If the executable cannot be found
    """
    name = driver_name(override, environ, plain_ld)

    found = shutil.which(name)
    if found is None:
        raise ToolNotFoundError(f"failed to locate {name}")
    return Path(found)


def format_command_line(tool: Union[str, Path], args: Sequence[str]) -> str:
    """Render a command line for display."""
    return shlex.join([str(tool)] + [str(arg) for arg in args])


def invoke(tool: Union[str, Path], args: Sequence[str], verbose: bool = False) -> int:
    """
    Run the tool and wait for it.

    The child inherits stdin/stdout/stderr so linker diagnostics reach the
    user unchanged.

    Args:
        tool: Executable to run
        args: Arguments (without the program name)
        verbose: Echo the command line before running it

    Returns:
        The process exit status, verbatim

    Raises:
        ToolInvocationError: If the process cannot be started
    """
    if verbose:
        print(format_command_line(tool, args))

    cmd = [str(tool)] + [str(arg) for arg in args]
    try:
        process = subprocess.Popen(cmd)
    except OSError as e:
        raise ToolInvocationError(f"Error executing {tool}: {e}") from e

    try:
        returncode = process.wait()
    except KeyboardInterrupt as ke:
        logging.debug(f"Interrupted, terminating {tool} (pid {process.pid})")
        terminate_process_tree(process.pid)
        handle_keyboard_interrupt_properly(ke)
        raise  # Never reached, but satisfies type checker

    if returncode != 0:
        logging.debug(f"{tool} exited with status {returncode}")
    return returncode
