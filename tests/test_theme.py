"""Tests for thoughts.theme — bundled page template and fallback chain."""

from __future__ import annotations

from pathlib import Path

from thoughts.config import ThoughtsConfig
from thoughts.theme import bundled_templates_path, get_template_dirs


class TestBundledTheme:
    """The bundled default theme ships the page template."""

    def test_page_template_present(self) -> None:
        assert (bundled_templates_path() / "page.html").is_file()

    def test_page_template_uses_title_and_content(self) -> None:
        source = (bundled_templates_path() / "page.html").read_text(encoding="utf-8")
        assert "{{ title }}" in source
        assert "{{ content }}" in source


class TestGetTemplateDirs:
    """get_template_dirs — user templates first, bundled theme last."""

    def test_bundled_only_without_user_dir(self, tmp_path: Path) -> None:
        dirs = get_template_dirs(ThoughtsConfig(root=tmp_path))
        assert dirs == [bundled_templates_path()]

    def test_user_dir_takes_priority(self, tmp_path: Path) -> None:
        (tmp_path / "templates").mkdir()
        dirs = get_template_dirs(ThoughtsConfig(root=tmp_path))
        assert dirs == [tmp_path / "templates", bundled_templates_path()]

    def test_custom_templates_dir(self, tmp_path: Path) -> None:
        (tmp_path / "layouts").mkdir()
        dirs = get_template_dirs(ThoughtsConfig(root=tmp_path, templates_dir="layouts"))
        assert dirs[0] == tmp_path / "layouts"
