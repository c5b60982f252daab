"""CLI utility functions for gcclink.

This module provides common utilities used by the command line including:
- Position-tagged collection of user linker / driver switches
- Logging setup
- Error handling and formatting
"""

import argparse
import logging
import sys
from typing import List, NoReturn, Optional

from gcclink.build.request import TaggedSwitch

# Exit status for problems detected before the driver is started
CONFIG_ERROR_EXIT_CODE = 2
INTERRUPT_EXIT_CODE = 130


class TaggedSwitchAction(argparse.Action):
    """Appends switches tagged with their command-line position.

    argparse calls actions in command-line order, so a counter shared by all
    TaggedSwitchAction options gives every switch a unique, increasing
    position no matter which option it was given with.
    """

    COUNTER_ATTR = "_switch_position"

    def __call__(self, parser, namespace, values, option_string=None):
        position = getattr(namespace, self.COUNTER_ATTR, 0)
        setattr(namespace, self.COUNTER_ATTR, position + 1)

        switches: List[TaggedSwitch] = list(getattr(namespace, self.dest, None) or [])
        switches.append(TaggedSwitch(position=position, value=values))
        setattr(namespace, self.dest, switches)


_console_handler: Optional[logging.Handler] = None


def setup_logging(verbose: bool = False) -> None:
    """Setup logging for the CLI.

    Calling it again replaces the console handler added by the previous call.
    """
    global _console_handler

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if _console_handler is not None:
        logger.removeHandler(_console_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)
    _console_handler = console_handler


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message to stderr.

        Args:
            title: Error title (e.g., "Configuration error", "Link failed")
            message: Error message details
        """
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}", file=sys.stderr)
        if message:
            print(message, file=sys.stderr)

    @staticmethod
    def print_success(message: str) -> None:
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}", file=sys.stderr)

    @staticmethod
    def handle_configuration_error(error: Exception) -> NoReturn:
        """Report a pre-flight error; no process was started.

        Args:
            error: The error to report
        """
        ErrorFormatter.print_error("Configuration error", str(error))
        sys.exit(CONFIG_ERROR_EXIT_CODE)

    @staticmethod
    def handle_keyboard_interrupt() -> NoReturn:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Link interrupted")
        sys.exit(INTERRUPT_EXIT_CODE)

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> NoReturn:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)

        sys.exit(1)
