"""
gcclink.ini configuration parser.

This module reads link defaults from an INI file so projects don't have to
repeat the same linker options on every invocation.

Example gcclink.ini:
    [link]
    gcc = /usr/bin/gcc-12
    linker = gold
    lto_binary = /opt/llvm/lib/LLVMgold.so
    sanitizers = address, fuzzer
    link_no_cpp = false
"""

import configparser
from pathlib import Path
from typing import Dict, List, Optional


class LinkConfigError(Exception):
    """Exception raised for gcclink.ini configuration errors."""

    pass


class LinkConfig:
    """
    Parser for gcclink.ini configuration files.

    Usage:
        config = LinkConfig(Path("gcclink.ini"))
        linker = config.get("linker")
        sanitizers = config.get_list("sanitizers")
    """

    SECTION = "link"

    KNOWN_KEYS = {
        "gcc",
        "linker",
        "lto_binary",
        "lib_dir",
        "soname",
        "sanitizers",
        "link_no_cpp",
        "disable_linker_strip_dead",
        "target",
    }

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with a gcclink.ini file.

        Args:
            ini_path: Path to the gcclink.ini file

        Raises:
            LinkConfigError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = ini_path

        if not ini_path.exists():
            raise LinkConfigError(f"Configuration file not found: {ini_path}")

        self.config = configparser.ConfigParser(
            allow_no_value=True, interpolation=configparser.ExtendedInterpolation()
        )

        try:
            self.config.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise LinkConfigError(f"Failed to parse {ini_path}: {e}") from e

    def get_options(self) -> Dict[str, str]:
        """
        Get all options from the [link] section.

        Returns:
            Dictionary of option names to stripped values (empty if the
            section is missing)

        Raises:
            LinkConfigError: If an unknown option is present
        """
        if self.SECTION not in self.config:
            return {}

        options = {}
        try:
            for key in self.config[self.SECTION]:
                value = self.config[self.SECTION][key]
                options[key] = (value or "").strip()
        except configparser.Error as e:
            raise LinkConfigError(f"Failed to read [{self.SECTION}] in {self.ini_path}: {e}") from e

        unknown = sorted(set(options) - self.KNOWN_KEYS)
        if unknown:
            raise LinkConfigError(
                f"Unknown option(s) in [{self.SECTION}] of {self.ini_path}: "
                + ", ".join(unknown)
            )

        return options

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a single option, or default when unset or empty."""
        value = self.get_options().get(key)
        return value if value else default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """
        Get a boolean option.

        Accepts the usual configparser spellings (yes/no, true/false, on/off, 1/0).

        Raises:
            LinkConfigError: If the value is not a boolean
        """
        value = self.get(key)
        if value is None:
            return default

        lowered = value.lower()
        if lowered not in configparser.ConfigParser.BOOLEAN_STATES:
            raise LinkConfigError(f"Option '{key}' must be a boolean, got '{value}'")
        return configparser.ConfigParser.BOOLEAN_STATES[lowered]

    def get_list(self, key: str) -> List[str]:
        """
        Get a comma or newline separated list option.

        Example:
            sanitizers = address, fuzzer
            # Returns: ['address', 'fuzzer']
        """
        value = self.get(key)
        if not value:
            return []

        items = []
        for line in value.replace(",", "\n").split("\n"):
            line = line.strip()
            if line:
                items.append(line)
        return items


def find_default_config(directory: Path) -> Optional[Path]:
    """Return directory/gcclink.ini if it exists."""
    candidate = directory / "gcclink.ini"
    return candidate if candidate.exists() else None
