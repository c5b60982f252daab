"""Candidate file lookup.

Runtime support libraries (sanitizer runtimes, LTO plugins, profiling
runtimes) can live in several places. The resolver returns the first
candidate that exists; a missing file is the normal case, not an error.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple, Union

PathLike = Union[str, Path]


class PathResolver:
    """Finds the first existing path among ordered candidates."""

    def __init__(self, exists: Optional[Callable[[Path], bool]] = None):
        """
        Initialize resolver.

        Args:
            exists: Existence predicate (defaults to Path.exists)
        """
        self._exists = exists or Path.exists

    def resolve(self, candidates: Iterable[Optional[PathLike]]) -> Optional[Path]:
        """
        Return the first candidate that exists.

        Args:
            candidates: Ordered candidate paths; None entries are skipped

        Returns:
            First existing path, or None if none exist
        """
        for candidate in candidates:
            if candidate is None:
                continue
            path = Path(candidate)
            if self._exists(path):
                return path
        return None

    def exists(self, path: PathLike) -> bool:
        return self._exists(Path(path))


@dataclass(frozen=True)
class CandidateLibrary:
    """A runtime support library with its ordered search candidates."""

    name: str
    candidates: Tuple[Optional[Path], ...]

    def resolve(self, resolver: PathResolver) -> Optional[Path]:
        path = resolver.resolve(self.candidates)
        if path is None:
            searched = [str(c) for c in self.candidates if c is not None]
            logging.debug(f"{self.name} not found (searched: {', '.join(searched) or 'nothing'})")
        else:
            logging.debug(f"{self.name} found: {path}")
        return path
