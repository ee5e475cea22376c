"""Unit tests for reveal.js page rendering and the render CLI."""

import pytest

from easyslide.tools import render
from easyslide.tools.render import render_page, render_sections


SECTION = "<section data-markdown><textarea data-template>{}</textarea></section>"


class TestRenderSections:
    def test_single_slides_are_flat(self):
        html = render_sections((("A",), ("B",)))
        assert html == SECTION.format("A") + "\n" + SECTION.format("B")

    def test_vertical_group_is_nested(self):
        html = render_sections((("A", "B"), ("C",)))
        nested = "<section>" + SECTION.format("A") + "\n" + SECTION.format("B") + "</section>"
        assert html == nested + "\n" + SECTION.format("C")

    def test_empty_deck_renders_nothing(self):
        assert render_sections(()) == ""

    def test_content_is_not_escaped(self):
        html = render_sections((("<b>bold</b> & more",),))
        assert "<b>bold</b> & more" in html


class TestRenderPage:
    def test_page_embeds_slides(self):
        page = render_page("# Hello\n---\n## World")
        assert SECTION.format("# Hello") in page
        assert SECTION.format("## World") in page
        assert "{{content}}" not in page
        assert "Reveal.initialize" in page

    def test_empty_document_renders_empty_shell(self):
        page = render_page("   ")
        assert "<section" not in page
        assert '<div class="slides">' in page

    def test_rendering_is_deterministic(self):
        text = "A\n--\nB\n---\nC"
        assert render_page(text) == render_page(text)


class TestRenderCli:
    def test_writes_output_file(self, tmp_path, capsys):
        source = tmp_path / "deck.md"
        source.write_text("A\n---\nB", encoding="utf-8")
        target = tmp_path / "out" / "index.html"

        render.main(["-i", str(source), "-o", str(target)])

        assert target.read_text(encoding="utf-8") == render_page("A\n---\nB")
        assert "Wrote:" in capsys.readouterr().out

    def test_missing_input_exits(self, tmp_path):
        with pytest.raises(SystemExit, match="Input file not found"):
            render.main(["--input", str(tmp_path / "nope.md"), "--output", str(tmp_path / "x.html")])
