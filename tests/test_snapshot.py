"""Tests for thoughts.content.snapshot — extraction and indexing."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest

from thoughts._errors import MissingIndexError
from thoughts.content.document import Document
from thoughts.content.snapshot import (
    Snapshot,
    build_snapshot,
    extract_documents,
    index_documents,
    route_for,
)

from .conftest import make_zipball, write_tree


def _zip_tree(files: dict[str, str | bytes]) -> zipfile.Path:
    return zipfile.Path(zipfile.ZipFile(io.BytesIO(make_zipball(files))))


class TestExtractDocuments:
    """extract_documents — walk, filter, strip the wrapper directory."""

    def test_only_markdown_files(self, notes_files: dict[str, str]) -> None:
        docs = extract_documents(_zip_tree(notes_files))
        assert sorted(d.path for d in docs) == [
            "README.md", "notes/other.md", "notes/today.md",
        ]

    def test_wrapper_directory_stripped(self) -> None:
        docs = extract_documents(_zip_tree({"a/b/c.md": "deep"}))
        assert [d.path for d in docs] == ["a/b/c.md"]

    def test_contents_captured(self) -> None:
        docs = extract_documents(_zip_tree({"README.md": "Hello"}))
        assert docs[0].raw == b"Hello"

    def test_lexical_walk_order(self) -> None:
        files = {"b.md": "b", "a/z.md": "z", "a.md": "a", "README.md": "r"}
        docs = extract_documents(_zip_tree(files))
        assert [d.path for d in docs] == ["README.md", "a/z.md", "a.md", "b.md"]

    def test_top_level_files_without_wrapper_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "stray.md").write_text("outside the wrapper")
        write_tree(tmp_path, {"README.md": "Hello"})
        docs = extract_documents(tmp_path)
        assert [d.path for d in docs] == ["README.md"]

    def test_directory_tree(self, tmp_path: Path, notes_files: dict[str, str]) -> None:
        write_tree(tmp_path, notes_files)
        docs = extract_documents(tmp_path)
        assert {d.path for d in docs} == {"README.md", "notes/other.md", "notes/today.md"}

    def test_custom_transform_passed_through(self) -> None:
        docs = extract_documents(
            _zip_tree({"README.md": "x"}), transform=lambda raw: b"T" + raw,
        )
        assert docs[0].render() == b"Tx"


class TestIndexDocuments:
    """index_documents — index promotion, suffix stripping, collisions."""

    def test_index_excluded_from_routes(self) -> None:
        snap = index_documents("sha", [Document("README.md", b"r"), Document("a.md", b"a")])
        assert snap.index.path == "README.md"
        assert snap.routes() == ["a"]

    def test_suffix_stripped(self) -> None:
        snap = index_documents(
            "sha", [Document("README.md", b""), Document("notes/today.md", b"t")],
        )
        assert snap.resolve("notes/today") is not None
        assert snap.resolve("notes/today.md") is None

    def test_nested_readme_is_a_plain_document(self) -> None:
        snap = index_documents(
            "sha", [Document("README.md", b"root"), Document("notes/README.md", b"n")],
        )
        assert snap.index.raw == b"root"
        assert snap.resolve("notes/README").raw == b"n"

    def test_duplicate_route_last_seen_wins(self) -> None:
        first = Document("a.md", b"first")
        second = Document("a.md", b"second")
        snap = index_documents("sha", [Document("README.md", b""), first, second])
        assert snap.resolve("a") is second

    def test_missing_index_raises(self) -> None:
        with pytest.raises(MissingIndexError, match="no index document found"):
            index_documents("sha", [Document("a.md", b"a")])

    def test_fingerprint_recorded(self) -> None:
        snap = index_documents("abc123", [Document("README.md", b"")])
        assert snap.fingerprint == "abc123"


class TestSnapshot:
    """Snapshot — read-only resolution."""

    @pytest.fixture
    def snapshot(self, notes_files: dict[str, str]) -> Snapshot:
        return build_snapshot("sha-1", _zip_tree(notes_files))

    def test_root_resolves_to_index(self, snapshot: Snapshot) -> None:
        assert snapshot.resolve("/") is snapshot.index
        assert snapshot.resolve("") is snapshot.index

    def test_slashes_ignored(self, snapshot: Snapshot) -> None:
        assert snapshot.resolve("/notes/today/") is snapshot.resolve("notes/today")

    def test_unknown_route(self, snapshot: Snapshot) -> None:
        assert snapshot.resolve("/nope") is None

    def test_len_counts_index(self, snapshot: Snapshot) -> None:
        assert len(snapshot) == 3

    def test_documents_mapping_read_only(self, snapshot: Snapshot) -> None:
        with pytest.raises(TypeError):
            snapshot.documents["x"] = Document("x.md", b"")  # type: ignore[index]

    def test_frozen(self, snapshot: Snapshot) -> None:
        with pytest.raises(AttributeError):
            snapshot.fingerprint = "other"  # type: ignore[misc]

    def test_missing_index_in_tree(self) -> None:
        with pytest.raises(MissingIndexError):
            build_snapshot("sha", _zip_tree({"notes/a.md": "a"}))


class TestRouteFor:
    def test_strips_suffix_once(self) -> None:
        assert route_for("a/b.md") == "a/b"
        assert route_for("a.md.md") == "a.md"
