"""Filesystem vault access: note enumeration and content reads."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Tuple

from .config import AppConfig, get_config
from .path_filter import PathFilter

logger = logging.getLogger(__name__)

INVALID_PATH_CHARS = {'<', '>', ':', '"', '|', '?', '*'}
DIRECTORY_PROBE_NAME = "probe"


class VaultError(ValueError):
    """Raised for an unusable vault root or a path outside the vault."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def validate_note_path(note_path: str, extensions: Sequence[str] = (".md",)) -> Tuple[bool, str]:
    """
    Validate a relative note path.

    Returns (is_valid, message). Message is empty when valid.
    """
    if not note_path:
        return False, "Path must not be empty"
    if not note_path.endswith(tuple(extensions)):
        return False, f"Path must end with one of {', '.join(extensions)}"
    if "\\" in note_path:
        return False, "Path must use Unix separators (/)"
    if note_path.startswith("/"):
        return False, "Path must be relative (no leading /)"
    if ".." in note_path.split("/"):
        return False, "Path must not contain '..'"
    if any(char in INVALID_PATH_CHARS for char in note_path):
        return False, "Path contains invalid characters"
    return True, ""


def sanitize_path(vault_root: Path, note_path: str) -> Path:
    """
    Resolve a note path within the vault.

    Raises VaultError if the resolved path escapes the vault root.
    """
    vault = vault_root.resolve()
    full_path = (vault / note_path).resolve()
    if full_path != vault and vault not in full_path.parents:
        raise VaultError(f"Path escapes vault root: {note_path}")
    return full_path


class VaultService:
    """Read-only view of a note vault on disk."""

    def __init__(
        self,
        config: AppConfig | None = None,
        path_filter: PathFilter | None = None,
    ) -> None:
        self.config = config or get_config()
        self.vault_root = self.config.vault_path
        self.path_filter = path_filter or PathFilter.from_config(self.config)
        if not self.vault_root.is_dir():
            raise VaultError(f"Vault directory not found: {self.vault_root}")

    def is_note_file(self, name: str) -> bool:
        return name.endswith(self.config.note_extensions)

    def list_notes(self) -> List[str]:
        """
        Enumerate note paths relative to the vault root.

        Depth-first, entries visited in name order. Symbolic links are never
        followed. Files must pass the path filter; a directory is skipped when
        its own path is ignored or a probe note inside it would be rejected,
        so directory rules apply regardless of file names.
        """
        probe = f"{DIRECTORY_PROBE_NAME}{self.config.note_extension}"
        notes: List[str] = []
        stack: List[Tuple[Path, str]] = list(reversed(self._scan(self.vault_root, "")))

        while stack:
            entry, relative_path = stack.pop()

            if entry.is_symlink():
                logger.debug("Skipped symlink", extra={"path": relative_path})
                continue

            if entry.is_dir():
                if self.path_filter.is_ignored(relative_path) or not self.path_filter.is_allowed(
                    f"{relative_path}/{probe}"
                ):
                    logger.debug("Pruned directory", extra={"path": relative_path})
                    continue
                stack.extend(reversed(self._scan(entry, relative_path)))
                continue

            if not self.path_filter.is_allowed(relative_path):
                continue
            if entry.is_file() and self.is_note_file(entry.name):
                notes.append(relative_path)

        return notes

    def _scan(self, directory: Path, relative_dir: str) -> List[Tuple[Path, str]]:
        try:
            entries = sorted(directory.iterdir(), key=lambda item: item.name)
        except OSError as exc:
            logger.warning(
                "Skipping unreadable directory",
                extra={"path": relative_dir or ".", "error": str(exc)},
            )
            return []
        return [
            (entry, f"{relative_dir}/{entry.name}" if relative_dir else entry.name)
            for entry in entries
        ]

    def resolve_note_path(self, note_path: str) -> Path:
        """
        Validate and resolve a note path inside the vault.

        Raises VaultError for invalid paths.
        """
        is_valid, message = validate_note_path(note_path, self.config.note_extensions)
        if not is_valid:
            raise VaultError(message)
        return sanitize_path(self.vault_root, note_path)

    def read_text(self, note_path: str) -> str:
        """
        Return the full text of a note; raises OSError or ValueError on failure.

        Only the vault-escape check applies, so enumerated names with
        characters such as ``:`` or ``?`` stay readable.
        """
        absolute_path = sanitize_path(self.vault_root, note_path)
        return absolute_path.read_text(encoding="utf-8")


__all__ = [
    "VaultService",
    "VaultError",
    "validate_note_path",
    "sanitize_path",
    "DIRECTORY_PROBE_NAME",
]
