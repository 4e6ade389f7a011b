"""Application configuration helpers."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_IGNORED_PATTERNS = [".obsidian", ".git", ".trash", "node_modules", ".DS_Store"]
DEFAULT_ALLOWED_EXTENSIONS = [".md", ".markdown"]
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _check_extension(value: str) -> str:
    cleaned = value.strip()
    if not cleaned.startswith(".") or len(cleaned) < 2:
        raise ValueError(f"Extension must start with '.': {value!r}")
    if "/" in cleaned:
        raise ValueError(f"Extension must not contain '/': {value!r}")
    return cleaned


class AppConfig(BaseModel):
    """Runtime configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    vault_path: Path = Field(..., description="Root directory of the note vault")
    note_extension: str = Field(
        default=".md",
        description="Canonical note extension, appended to link targets that lack it",
    )
    alternate_extensions: Tuple[str, ...] = Field(
        default=(".markdown",),
        description="Extra extensions accepted when enumerating notes (not in link matching)",
    )
    ignored_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORED_PATTERNS),
        description="Glob patterns matched against relative paths and path segments",
    )
    allowed_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_EXTENSIONS),
        description="File extensions the path filter lets through",
    )
    max_concurrency: int = Field(
        default=32,
        ge=1,
        description="Upper bound on notes read and parsed at the same time",
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    @field_validator("vault_path", mode="before")
    @classmethod
    def _normalize_vault_path(cls, value: str | Path | None) -> Path:
        if value is None or value == "":
            raise ValueError("VAULT_PATH is required")
        path = value if isinstance(value, Path) else Path(value)
        return path.expanduser().resolve()

    @field_validator("note_extension")
    @classmethod
    def _validate_note_extension(cls, value: str) -> str:
        return _check_extension(value)

    @field_validator("alternate_extensions", "allowed_extensions")
    @classmethod
    def _validate_extension_list(cls, value):
        return type(value)(_check_extension(item) for item in value)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(LOG_LEVELS)}")
        return level

    @property
    def note_extensions(self) -> Tuple[str, ...]:
        """Every extension that marks a file as a note during enumeration."""
        return (self.note_extension, *self.alternate_extensions)


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


def _read_env_list(key: str, default: List[str]) -> List[str]:
    raw = _read_env(key)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load and cache application configuration."""
    load_dotenv()
    return AppConfig(
        vault_path=_read_env("VAULT_PATH", os.getcwd()),
        note_extension=_read_env("VAULT_NOTE_EXTENSION", ".md"),
        alternate_extensions=tuple(
            _read_env_list("VAULT_ALTERNATE_EXTENSIONS", [".markdown"])
        ),
        ignored_patterns=_read_env_list("VAULT_IGNORED_PATTERNS", DEFAULT_IGNORED_PATTERNS),
        allowed_extensions=_read_env_list(
            "VAULT_ALLOWED_EXTENSIONS", DEFAULT_ALLOWED_EXTENSIONS
        ),
        max_concurrency=int(_read_env("GRAPH_MAX_CONCURRENCY", "32")),
        log_level=_read_env("LOG_LEVEL", "INFO"),
    )


def reload_config() -> AppConfig:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "DEFAULT_IGNORED_PATTERNS",
    "DEFAULT_ALLOWED_EXTENSIONS",
]
