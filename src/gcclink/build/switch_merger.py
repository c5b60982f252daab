"""User switch merging.

Linker switches (-L) and compiler-driver switches (-Xcc) are collected into
separate lists but must reach the driver in the order the user typed them.
Each switch carries its position on the original command line; merging
interleaves both lists by that position.
"""

import sys
from typing import Iterator, List, Sequence, Tuple

from .request import TaggedSwitch

LINKER = "linker"
CC = "cc"

# Switches the driver must see itself. -l/-L go through the driver so user
# search paths come before the driver's built-in library paths.
DRIVER_HANDLED_PREFIXES = ("-l", "-L", "-Wl,", "-shared", "-static")


def interleave_by_position(
    linker_switches: Sequence[TaggedSwitch],
    cc_switches: Sequence[TaggedSwitch],
) -> Iterator[Tuple[str, TaggedSwitch]]:
    """
    Interleave two position-tagged switch lists.

    Args:
        linker_switches: Linker switches, in increasing position order
        cc_switches: Driver switches, in increasing position order

    Yields:
        (origin, switch) tuples where origin is LINKER or CC

    Raises:
        ValueError: If a position appears in both lists
    """
    ilink = 0
    icc = 0
    while True:
        linkpos = linker_switches[ilink].position if ilink < len(linker_switches) else sys.maxsize
        ccpos = cc_switches[icc].position if icc < len(cc_switches) else sys.maxsize

        if linkpos < ccpos:
            yield LINKER, linker_switches[ilink]
            ilink += 1
        elif ccpos < linkpos:
            yield CC, cc_switches[icc]
            icc += 1
        elif linkpos == sys.maxsize:
            return
        else:
            raise ValueError(f"Duplicate switch position {linkpos}")


def forward_linker_switch(switch: str) -> List[str]:
    """Render one linker switch for the toolchain driver."""
    if switch.startswith(DRIVER_HANDLED_PREFIXES):
        return [switch]
    return ["-Xlinker", switch]


def merge_user_switches(
    linker_switches: Sequence[TaggedSwitch],
    cc_switches: Sequence[TaggedSwitch],
) -> List[str]:
    """
    Merge user switches into driver arguments, preserving command-line order.

    Example:
        >>> merge_user_switches(
        ...     [TaggedSwitch(0, "--no-undefined"), TaggedSwitch(2, "-lz")],
        ...     [TaggedSwitch(1, "-pthread")])
        ['-Xlinker', '--no-undefined', '-pthread', '-lz']
    """
    args: List[str] = []
    for origin, switch in interleave_by_position(linker_switches, cc_switches):
        if origin == LINKER:
            args.extend(forward_linker_switch(switch.value))
        else:
            args.append(switch.value)
    return args
