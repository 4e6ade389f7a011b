from vault_graph.services.links import (
    NoteIndex,
    RawLink,
    ensure_extension,
    extract_links,
    iter_markdown_links,
    iter_wikilinks,
    resolve_link,
    source_directory,
    strip_extension,
)


def test_wikilink_forms() -> None:
    content = "See [[Alpha]], [[Beta|the beta]], [[Gamma#Intro]] and [[Delta#Part|D]] or [[Eps.md]]."

    links = list(iter_wikilinks(content))

    assert links == [
        RawLink("Alpha.md"),
        RawLink("Beta.md", "the beta"),
        RawLink("Gamma.md"),
        RawLink("Delta.md", "D"),
        RawLink("Eps.md"),
    ]


def test_wikilink_trims_target_and_drops_blank_alias() -> None:
    links = extract_links("[[  folder/Note  |   ]] [[ ]] [[Other| spaced alias ]]")

    assert links == [
        RawLink("folder/Note.md"),
        RawLink("Other.md", "spaced alias"),
    ]


def test_markdown_links_only_match_note_targets() -> None:
    content = (
        "[Read](./notes/x.md#part) [site](https://example.com) "
        "[Upper](X.MD) [](bare.md) [Img](pic.png)"
    )

    links = list(iter_markdown_links(content))

    assert links == [RawLink("notes/x.md", "Read"), RawLink("bare.md")]


def test_markdown_links_do_not_append_extension() -> None:
    assert list(iter_markdown_links("[Note](folder/note)")) == []


def test_wikilinks_come_before_markdown_links() -> None:
    content = "[first](first.md) then [[second]] then [third](third.md) then [[fourth]]"

    targets = [link.target for link in extract_links(content)]

    assert targets == ["second.md", "fourth.md", "first.md", "third.md"]


def test_malformed_markup_is_ignored() -> None:
    assert extract_links("[[unterminated [also](broken.md and [[Note|alias") == []
    assert extract_links("[not a link] (note.md) [[]]") == []
    assert extract_links("") == []


def test_extract_links_is_restartable() -> None:
    content = "[[A]] [b](b.md) [[A|again]]"

    assert extract_links(content) == extract_links(content)
    assert len(extract_links(content)) == 3


def test_custom_extension() -> None:
    links = extract_links("[[Page]] [doc](doc.txt) [md](note.md)", extension=".txt")

    assert links == [RawLink("Page.txt"), RawLink("doc.txt", "doc")]


def test_path_helpers() -> None:
    assert ensure_extension("a/b") == "a/b.md"
    assert ensure_extension("a/b.md") == "a/b.md"
    assert strip_extension("Ghost.md") == "Ghost"
    assert strip_extension("Ghost") == "Ghost"
    assert source_directory("a/b/c.md") == "a/b"
    assert source_directory("c.md") == ""


def test_resolve_exact_match() -> None:
    index = NoteIndex(["notes/x.md", "x.md"])

    assert index.resolve("x") == "x.md"
    assert index.resolve("notes/x.md") == "notes/x.md"


def test_resolve_prefers_same_directory() -> None:
    for known in (["a/x.md", "b/x.md"], ["b/x.md", "a/x.md"]):
        assert resolve_link("x", known, "a") == "a/x.md"
        assert resolve_link("x", known, "b") == "b/x.md"


def test_resolve_case_insensitive_fallback() -> None:
    known = ["Notes/Todo.md"]

    assert resolve_link("todo", known, "") == "Notes/Todo.md"
    assert resolve_link("todo", known, "elsewhere") == "Notes/Todo.md"
    assert resolve_link("notes/TODO", known, "") == "Notes/Todo.md"


def test_full_path_match_beats_filename_match() -> None:
    index = NoteIndex(["other/a/b.md", "A/B.md"])

    assert index.resolve("a/b") == "A/B.md"


def test_resolve_ties_follow_enumeration_order() -> None:
    assert resolve_link("NOTE", ["z/Note.md", "a/note.md"]) == "z/Note.md"
    assert resolve_link("NOTE", ["a/note.md", "z/Note.md"]) == "a/note.md"


def test_resolve_unknown_target_returns_none() -> None:
    index = NoteIndex(["a.md"])

    assert index.resolve("missing") is None
    assert index.resolve("folder/missing.md", "folder") is None
    assert "a.md" in index
    assert len(index) == 1
