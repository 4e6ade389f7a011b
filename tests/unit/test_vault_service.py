import os
from pathlib import Path

import pytest

from vault_graph.services.config import AppConfig
from vault_graph.services.path_filter import PathFilter
from vault_graph.services.vault import VaultError, VaultService, sanitize_path, validate_note_path


def test_list_notes_walks_depth_first_in_name_order(write_vault) -> None:
    config = write_vault(
        {
            "b.md": "",
            "a.md": "",
            "sub/deep/d.markdown": "",
            "sub/c.md": "",
            "z.md": "",
            ".obsidian/workspace.md": "",
            "image.png": "",
            "notes.txt": "",
        }
    )

    notes = VaultService(config=config).list_notes()

    assert notes == ["a.md", "b.md", "sub/c.md", "sub/deep/d.markdown", "z.md"]


def test_list_notes_prunes_directories_by_contents_rule(write_vault) -> None:
    config = write_vault({"archive/old.md": "", "archive.md": "", "keep/new.md": ""})
    path_filter = PathFilter(ignored_patterns=["archive/**"])

    notes = VaultService(config=config, path_filter=path_filter).list_notes()

    assert notes == ["archive.md", "keep/new.md"]


def test_list_notes_prunes_ignored_directory_path(write_vault) -> None:
    config = write_vault({"notes/drafts/x.md": "", "notes/keep.md": ""})
    path_filter = PathFilter(ignored_patterns=["notes/drafts"])

    assert not path_filter.is_allowed("notes/drafts")
    assert VaultService(config=config, path_filter=path_filter).list_notes() == ["notes/keep.md"]


def test_list_notes_keeps_dotted_directory_names(write_vault) -> None:
    config = write_vault({"v1.2/release.md": ""})

    assert VaultService(config=config).list_notes() == ["v1.2/release.md"]


def test_list_notes_skips_symlinks(write_vault, tmp_path: Path) -> None:
    config = write_vault({"real/a.md": "", "b.md": ""})
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "external.md").write_text("", encoding="utf-8")
    os.symlink(outside, config.vault_path / "linked_dir", target_is_directory=True)
    os.symlink(config.vault_path / "b.md", config.vault_path / "linked_file.md")

    assert VaultService(config=config).list_notes() == ["b.md", "real/a.md"]


def test_list_notes_respects_configured_extensions(write_vault) -> None:
    base = write_vault({"a.md": "", "b.markdown": ""})
    config = AppConfig(vault_path=base.vault_path, alternate_extensions=())

    assert VaultService(config=config).list_notes() == ["a.md"]


def test_missing_vault_raises(tmp_path: Path) -> None:
    config = AppConfig(vault_path=tmp_path / "does-not-exist")

    with pytest.raises(VaultError):
        VaultService(config=config)


def test_read_text(write_vault) -> None:
    config = write_vault({"folder/note.md": "Hello [[World]]"})
    service = VaultService(config=config)

    assert service.read_text("folder/note.md") == "Hello [[World]]"

    with pytest.raises(FileNotFoundError):
        service.read_text("folder/missing.md")



def test_read_text_accepts_enumerated_names_with_reserved_characters(write_vault) -> None:
    config = write_vault({"Meeting: 2024?.md": "[[target]]"})
    service = VaultService(config=config)

    assert service.list_notes() == ["Meeting: 2024?.md"]
    assert service.read_text("Meeting: 2024?.md") == "[[target]]"

    with pytest.raises(VaultError):
        service.read_text("../outside.md")


def test_resolve_note_path_blocks_escape(write_vault) -> None:
    service = VaultService(config=write_vault({"a.md": ""}))

    with pytest.raises(VaultError):
        service.resolve_note_path("../outside.md")
    with pytest.raises(VaultError):
        service.resolve_note_path("/etc/passwd.md")


def test_sanitize_path_blocks_escape(tmp_path: Path) -> None:
    with pytest.raises(VaultError):
        sanitize_path(tmp_path, "../outside.md")

    assert sanitize_path(tmp_path, "inside/note.md") == (tmp_path / "inside" / "note.md").resolve()


def test_validate_note_path() -> None:
    assert validate_note_path("notes/a.md") == (True, "")
    assert validate_note_path("notes/a.markdown", (".md", ".markdown"))[0]
    assert not validate_note_path("notes/a.txt")[0]
    assert not validate_note_path("notes\\a.md")[0]
    assert not validate_note_path("")[0]
    assert validate_note_path("notes/v1..2.md")[0]
