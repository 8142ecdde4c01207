"""Tests for thoughts.content.document — memoized rendering and link rewriting."""

from __future__ import annotations

import pytest

from thoughts._errors import RenderError
from thoughts.content.document import Document, render_markdown, rewrite_links


class _CountingTransform:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, raw: bytes) -> bytes:
        self.calls += 1
        return b"<p>" + raw + b"</p>"


class TestRewriteLinks:
    """rewrite_links — same-tree .md targets lose their suffix."""

    def test_relative_link_stripped(self) -> None:
        assert rewrite_links("See [link](./other.md)") == "See [link](./other)"

    def test_nested_and_parent_links_stripped(self) -> None:
        src = "[a](notes/a.md) and [b](../b.md)"
        assert rewrite_links(src) == "[a](notes/a) and [b](../b)"

    def test_fragment_preserved(self) -> None:
        assert rewrite_links("[x](./x.md#top)") == "[x](./x#top)"

    def test_external_link_untouched(self) -> None:
        src = "[readme](https://github.com/owner/repo/blob/main/README.md)"
        assert rewrite_links(src) == src

    def test_protocol_relative_link_untouched(self) -> None:
        src = "[a](//cdn.example.com/a.md)"
        assert rewrite_links(src) == src

    def test_link_with_title_stripped(self) -> None:
        assert rewrite_links('[a](./x.md "Next note")') == '[a](./x "Next note")'

    def test_link_with_fragment_and_title_stripped(self) -> None:
        assert rewrite_links('[a](./x.md#top "t")') == '[a](./x#top "t")'

    def test_other_suffixes_untouched(self) -> None:
        src = "[doc](./notes.mdx) [img](./logo.png)"
        assert rewrite_links(src) == src

    def test_plain_text_mention_untouched(self) -> None:
        src = "edit other.md by hand"
        assert rewrite_links(src) == src


class TestRenderMarkdown:
    """render_markdown — pure raw bytes -> HTML bytes transform."""

    def test_renders_heading(self) -> None:
        html = render_markdown(b"# Hello\n")
        assert b"<h1" in html
        assert b"Hello" in html

    def test_link_target_routed(self) -> None:
        html = render_markdown(b"See [link](./other.md)\n")
        assert b'href="./other"' in html
        assert b"other.md" not in html

    def test_deterministic(self) -> None:
        raw = b"# Title\n\n| a | b |\n|---|---|\n| 1 | 2 |\n"
        assert render_markdown(raw) == render_markdown(raw)


class TestDocument:
    """Document.render — one transform, then the cached bytes."""

    def test_render_memoizes(self) -> None:
        transform = _CountingTransform()
        doc = Document("notes/a.md", b"hi", transform=transform)

        assert not doc.rendered
        first = doc.render()
        second = doc.render()

        assert first == second == b"<p>hi</p>"
        assert transform.calls == 1
        assert doc.rendered

    def test_default_transform_is_markdown(self) -> None:
        doc = Document("README.md", b"Hello")
        assert b"Hello" in doc.render()
        assert doc.render() is doc.render()

    def test_raw_is_immutable_bytes(self) -> None:
        data = bytearray(b"abc")
        doc = Document("a.md", data)
        data[0] = ord("z")
        assert doc.raw == b"abc"

    def test_transform_failure_raises_render_error(self) -> None:
        def broken(raw: bytes) -> bytes:
            raise ValueError("bad markdown")

        doc = Document("bad.md", b"x", transform=broken)
        with pytest.raises(RenderError, match="bad.md"):
            doc.render()
        assert not doc.rendered

    def test_undecodable_bytes_raise_render_error(self) -> None:
        doc = Document("latin.md", b"\xff\xfe caf\xe9")
        with pytest.raises(RenderError):
            doc.render()

    def test_failure_does_not_poison_later_success(self) -> None:
        attempts: list[int] = []

        def flaky(raw: bytes) -> bytes:
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("transient")
            return b"ok"

        doc = Document("f.md", b"x", transform=flaky)
        with pytest.raises(RenderError):
            doc.render()
        assert doc.render() == b"ok"
