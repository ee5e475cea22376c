"""Files backing the current presentation.

Only the most recent upload is kept: ``slide.md`` (and ``index.html`` when
rendering server-side) are overwritten in place.
"""

from __future__ import annotations

import logging
from pathlib import Path

from easyslide.tools.render import render_page

logger = logging.getLogger(__name__)

MARKDOWN_FILENAME = "slide.md"
HTML_FILENAME = "index.html"

DEFAULT_MARKDOWN = """# Welcome to Easy Slide

Use the upload button to upload your markdown file

---

## How to Use

1. Upload your markdown file
2. View your presentation here
3. Use arrow keys to navigate

---

## Markdown Syntax

- Use three dashes (---) to separate slides
- Use two dashes (--) for vertical slides
- Standard markdown formatting works
- Code blocks are syntax highlighted"""


def write_markdown(directory: Path, markdown: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / MARKDOWN_FILENAME
    path.write_text(markdown, encoding="utf-8")
    return path


def publish_static(directory: Path, markdown: str) -> Path:
    """Render ``markdown`` and write both source and page into ``directory``.

    Returns the path of the generated page.
    """
    write_markdown(directory, markdown)
    html_path = directory / HTML_FILENAME
    html_path.write_text(render_page(markdown), encoding="utf-8")
    return html_path


def ensure_static_default(directory: Path) -> None:
    if (directory / HTML_FILENAME).exists():
        return
    logger.info(f"No presentation in {directory}, writing welcome deck")
    publish_static(directory, DEFAULT_MARKDOWN)


def ensure_markdown_default(directory: Path) -> Path:
    path = directory / MARKDOWN_FILENAME
    if path.exists():
        return path
    logger.info(f"No slide document in {directory}, writing welcome deck")
    return write_markdown(directory, DEFAULT_MARKDOWN)
