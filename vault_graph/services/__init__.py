"""Service layer: vault access, link parsing and graph queries."""

from .config import AppConfig, get_config, reload_config
from .graph import GraphService
from .links import (
    NoteIndex,
    RawLink,
    ensure_extension,
    extract_links,
    iter_markdown_links,
    iter_wikilinks,
    resolve_link,
    strip_extension,
)
from .path_filter import PathFilter
from .vault import VaultError, VaultService, sanitize_path, validate_note_path

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "GraphService",
    "NoteIndex",
    "RawLink",
    "ensure_extension",
    "strip_extension",
    "extract_links",
    "iter_wikilinks",
    "iter_markdown_links",
    "resolve_link",
    "PathFilter",
    "VaultService",
    "VaultError",
    "sanitize_path",
    "validate_note_path",
]
