from __future__ import annotations

from typing import Tuple

# A line holding only "---" separates horizontal slides, "--" vertical ones.
HORIZONTAL_SEPARATOR = "\n---\n"
VERTICAL_SEPARATOR = "\n--\n"

SlideGroup = Tuple[str, ...]
Deck = Tuple[SlideGroup, ...]


def split_slides(
    markdown: str,
    horizontal: str = HORIZONTAL_SEPARATOR,
    vertical: str = VERTICAL_SEPARATOR,
) -> Deck:
    """Split markdown into slide groups, one per horizontal position.

    Blank fragments are dropped, so empty or whitespace-only input gives an
    empty deck. A fragment containing the vertical separator becomes a group
    of several sub-slides, anything else a group of one.
    """
    groups: list[SlideGroup] = []
    for fragment in markdown.split(horizontal):
        fragment = fragment.strip()
        if not fragment:
            continue
        if vertical in fragment:
            groups.append(tuple(fragment.split(vertical)))
        else:
            groups.append((fragment,))
    return tuple(groups)
