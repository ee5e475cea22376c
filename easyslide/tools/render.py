from __future__ import annotations

import argparse
from pathlib import Path

from easyslide.tools.segment import Deck, split_slides


REVEAL_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/reveal.js@4.3.1/dist/reveal.css">
    <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/reveal.js@4.3.1/dist/theme/white.css">
    <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/highlight.js@11.7.0/styles/github.min.css">
    <style>
        .reveal h1, .reveal h2, .reveal h3 { color: #2c3e50; }
        .reveal .slides section { text-align: left; }
        .reveal h1, .reveal h2, .reveal h3 { text-align: center; }
        .reveal pre { width: 100%; }
        .reveal code { background: #f4f4f4; padding: 2px 4px; border-radius: 3px; }
    </style>
</head>
<body>
    <div class="reveal">
        <div class="slides">
            {{content}}
        </div>
    </div>
    <script src="https://cdn.jsdelivr.net/npm/reveal.js@4.3.1/dist/reveal.js"></script>
    <script src="https://cdn.jsdelivr.net/npm/reveal.js@4.3.1/plugin/markdown/markdown.js"></script>
    <script src="https://cdn.jsdelivr.net/npm/reveal.js@4.3.1/plugin/highlight/highlight.js"></script>
    <script src="https://cdn.jsdelivr.net/npm/reveal.js@4.3.1/plugin/notes/notes.js"></script>
    <script>
        Reveal.initialize({
            hash: true,
            plugins: [ RevealMarkdown, RevealHighlight, RevealNotes ],
            markdown: {
                smartypants: true
            }
        });
    </script>
</body>
</html>"""

CONTENT_PLACEHOLDER = "{{content}}"


def _markdown_section(text: str) -> str:
    # reveal.js parses the textarea body as markdown in the browser; no escaping here
    return f"<section data-markdown><textarea data-template>{text}</textarea></section>"


def render_sections(deck: Deck) -> str:
    """Render a deck as reveal.js sections, nesting groups of vertical slides."""
    sections: list[str] = []
    for group in deck:
        if len(group) > 1:
            inner = "\n".join(_markdown_section(s) for s in group)
            sections.append(f"<section>{inner}</section>")
        else:
            sections.append(_markdown_section(group[0]))
    return "\n".join(sections)


def render_page(markdown: str) -> str:
    """Turn a markdown document into a complete presentation page."""
    return REVEAL_TEMPLATE.replace(CONTENT_PLACEHOLDER, render_sections(split_slides(markdown)))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Convert a markdown file into a reveal.js presentation page")
    parser.add_argument("--input", "-i", required=True, help="Path to input Markdown file")
    parser.add_argument("--output", "-o", required=True, help="Path to output HTML file")
    args = parser.parse_args(argv)

    in_path = Path(args.input)
    out_path = Path(args.output)

    if not in_path.exists():
        raise SystemExit(f"Input file not found: {in_path}")

    html = render_page(in_path.read_text(encoding="utf-8-sig"))

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(html, encoding="utf-8")
    print(f"Wrote: {out_path}")


if __name__ == "__main__":
    main()
