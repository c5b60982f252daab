"""
Link components for gcclink.

This module provides the link subsystem:
- Build requests (inputs, target, feature settings)
- Runtime library lookup
- Command line construction for gcc-compatible drivers and plain ld
- Driver execution
"""

from .errors import (
    LinkConfigurationError,
    LinkerError,
    ToolInvocationError,
    ToolNotFoundError,
)
from .linker import ArgsBuilder, LdArgsBuilder, Linker, LinkResult, link_obj_to_binary
from .path_resolver import CandidateLibrary, PathResolver
from .request import BuildRequest, FullyStatic, LtoMode, Sanitizer, TaggedSwitch
from .switch_merger import interleave_by_position, merge_user_switches
from .tool_invoker import driver_name, format_command_line, invoke, locate_toolchain_driver

__all__ = [
    'LinkerError',
    'LinkConfigurationError',
    'ToolNotFoundError',
    'ToolInvocationError',
    'ArgsBuilder',
    'LdArgsBuilder',
    'Linker',
    'LinkResult',
    'link_obj_to_binary',
    'CandidateLibrary',
    'PathResolver',
    'BuildRequest',
    'FullyStatic',
    'LtoMode',
    'Sanitizer',
    'TaggedSwitch',
    'interleave_by_position',
    'merge_user_switches',
    'driver_name',
    'format_command_line',
    'invoke',
    'locate_toolchain_driver',
]
