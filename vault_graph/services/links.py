"""Link extraction and target resolution for vault notes.

Two link forms are recognised:

- wikilinks: ``[[Target]]``, ``[[Target|Alias]]``, ``[[Target#Heading]]`` and
  ``[[Target#Heading|Alias]]``
- markdown links to local notes: ``[Alias](folder/note.md)`` with an optional
  ``#fragment``

Every scan starts from a fresh ``re.finditer`` so the functions here are safe
to call from concurrent tasks.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
import posixpath
import re
from typing import Dict, Iterable, Iterator, List, Optional, Pattern, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".md"
WIKILINK_PATTERN = re.compile(r"\[\[([^\]|#]+)(?:#[^\]|]*)?(?:\|([^\]]*))?\]\]")


@dataclass(frozen=True)
class RawLink:
    """A link as written in a note, before resolution."""

    target: str
    alias: Optional[str] = None


def ensure_extension(path: str, extension: str = DEFAULT_EXTENSION) -> str:
    return path if path.endswith(extension) else f"{path}{extension}"


def strip_extension(path: str, extension: str = DEFAULT_EXTENSION) -> str:
    return path[: -len(extension)] if path.endswith(extension) else path


def source_directory(note_path: str) -> str:
    """Directory part of a vault-relative note path ('' for root notes)."""
    return posixpath.dirname(note_path)


@lru_cache(maxsize=None)
def markdown_link_pattern(extension: str = DEFAULT_EXTENSION) -> Pattern[str]:
    """Compiled ``[alias](path<extension>#fragment)`` pattern for an extension."""
    return re.compile(r"\[([^\]]*)\]\(([^)]+" + re.escape(extension) + r")(?:#[^)]*)?\)")


def _clean_alias(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    alias = raw.strip()
    return alias or None


def iter_wikilinks(content: str, extension: str = DEFAULT_EXTENSION) -> Iterator[RawLink]:
    """Yield wikilinks in document order; targets always carry the extension."""
    for match in WIKILINK_PATTERN.finditer(content or ""):
        target = match.group(1).strip()
        if not target:
            continue
        yield RawLink(
            target=ensure_extension(target, extension),
            alias=_clean_alias(match.group(2)),
        )


def iter_markdown_links(content: str, extension: str = DEFAULT_EXTENSION) -> Iterator[RawLink]:
    """Yield markdown links whose target ends in ``extension``, in document order."""
    for match in markdown_link_pattern(extension).finditer(content or ""):
        target = match.group(2).strip()
        if target.startswith("./"):
            target = target[2:]
        yield RawLink(target=target, alias=_clean_alias(match.group(1)))


def extract_links(content: str, extension: str = DEFAULT_EXTENSION) -> List[RawLink]:
    """
    Extract all links from note content.

    Wikilinks come first, then markdown links, each group in the order it
    appears in the text. Malformed markup is ignored.
    """
    links = list(iter_wikilinks(content, extension))
    links.extend(iter_markdown_links(content, extension))
    return links


class NoteIndex:
    """
    Known note identifiers in enumeration order, with lookup tables for
    link resolution.

    Case-insensitive and filename-only lookups keep the first identifier seen
    for a key, so ties are decided by enumeration order.
    """

    def __init__(self, paths: Iterable[str], extension: str = DEFAULT_EXTENSION) -> None:
        self.extension = extension
        self.paths: Tuple[str, ...] = tuple(paths)
        self._exact = frozenset(self.paths)
        self._by_lower: Dict[str, str] = {}
        self._by_basename: Dict[str, str] = {}
        for path in self.paths:
            self._by_lower.setdefault(path.lower(), path)
            self._by_basename.setdefault(posixpath.basename(path).lower(), path)

    def __contains__(self, path: object) -> bool:
        return path in self._exact

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def resolve(self, target: str, source_dir: str = "") -> Optional[str]:
        """
        Resolve a raw link target to a known note path.

        Precedence: exact path, path relative to ``source_dir``,
        case-insensitive path, then case-insensitive filename. Returns None
        when nothing matches.
        """
        normalized = ensure_extension(target, self.extension)

        if normalized in self._exact:
            return normalized

        if source_dir:
            relative = f"{source_dir}/{normalized}"
            if relative in self._exact:
                return relative

        by_lower = self._by_lower.get(normalized.lower())
        if by_lower is not None:
            return by_lower

        by_name = self._by_basename.get(posixpath.basename(normalized).lower())
        if by_name is not None:
            return by_name

        logger.debug(
            "Link target not resolved",
            extra={"target": target, "source_dir": source_dir},
        )
        return None


def resolve_link(
    target: str,
    known_paths: Sequence[str],
    source_dir: str = "",
    extension: str = DEFAULT_EXTENSION,
) -> Optional[str]:
    """One-off resolution against a sequence of known note paths."""
    return NoteIndex(known_paths, extension).resolve(target, source_dir)


__all__ = [
    "RawLink",
    "NoteIndex",
    "WIKILINK_PATTERN",
    "ensure_extension",
    "strip_extension",
    "source_directory",
    "markdown_link_pattern",
    "iter_wikilinks",
    "iter_markdown_links",
    "extract_links",
    "resolve_link",
]
