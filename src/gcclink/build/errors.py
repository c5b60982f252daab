"""Exceptions raised by the link subsystem."""


class LinkerError(Exception):
    """Raised when linking fails."""
    pass


class LinkConfigurationError(LinkerError):
    """Raised before any process is spawned when the link is misconfigured.

    Example: an explicitly requested LTO plugin does not exist.
    """
    pass


class ToolNotFoundError(LinkerError):
    """Raised when the toolchain driver executable cannot be located."""
    pass


class ToolInvocationError(LinkerError):
    """Raised when the toolchain driver process cannot be started."""
    pass
