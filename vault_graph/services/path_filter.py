"""Allow/deny rules for vault-relative paths."""

from __future__ import annotations

from fnmatch import fnmatchcase
import posixpath
from typing import Iterable, List, Optional

from .config import DEFAULT_ALLOWED_EXTENSIONS, DEFAULT_IGNORED_PATTERNS, AppConfig


class PathFilter:
    """
    Decide whether a relative vault path is eligible for the graph.

    A path is rejected when an ignored glob matches the whole path or any one
    of its segments, or when the final segment carries an extension that is
    not in ``allowed_extensions``. Paths without an extension pass the
    extension rule.
    """

    def __init__(
        self,
        ignored_patterns: Optional[Iterable[str]] = None,
        allowed_extensions: Optional[Iterable[str]] = None,
    ) -> None:
        self.ignored_patterns: List[str] = list(
            DEFAULT_IGNORED_PATTERNS if ignored_patterns is None else ignored_patterns
        )
        self.allowed_extensions = {
            ext.lower()
            for ext in (
                DEFAULT_ALLOWED_EXTENSIONS if allowed_extensions is None else allowed_extensions
            )
        }

    @classmethod
    def from_config(cls, config: AppConfig) -> "PathFilter":
        return cls(config.ignored_patterns, config.allowed_extensions)

    def is_ignored(self, relative_path: str) -> bool:
        cleaned = relative_path.strip("/")
        segments = [segment for segment in cleaned.split("/") if segment]
        for pattern in self.ignored_patterns:
            if fnmatchcase(cleaned, pattern):
                return True
            if any(fnmatchcase(segment, pattern) for segment in segments):
                return True
        return False

    def has_allowed_extension(self, relative_path: str) -> bool:
        _, ext = posixpath.splitext(posixpath.basename(relative_path))
        if not ext:
            return True
        return ext.lower() in self.allowed_extensions

    def is_allowed(self, relative_path: str) -> bool:
        """Return True when the path may be included in the vault walk."""
        if not relative_path or self.is_ignored(relative_path):
            return False
        return self.has_allowed_extension(relative_path)


__all__ = ["PathFilter"]
