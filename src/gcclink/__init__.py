"""gcclink - link object files through a gcc-compatible toolchain driver."""

__version__ = "0.1.0"
