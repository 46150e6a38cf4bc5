"""Whitespace normalization for markup text children."""

import html
import re
from typing import Optional

# ASCII whitespace only; a literal no-break space in the source is content.
_WHITESPACE_RUN = re.compile(r"[ \t\n\r\f\v]+")


def normalize_text(raw: str, first: bool, last: bool) -> Optional[str]:
    """
    Normalize the raw text of one markup child.

    Runs of whitespace collapse to a single space. Text spanning several
    lines is block formatted and trimmed at both ends. Single-line text sits
    inline among its siblings, so it is only trimmed at the edges of the
    children list: leading space when it is the first child, trailing space
    when it is the last.

    Character references are decoded after collapsing, so ``&nbsp;`` and
    friends keep their meaning.

    Returns None when nothing but whitespace is left.
    """
    collapsed = _WHITESPACE_RUN.sub(" ", raw)
    if not collapsed.strip(" "):
        return None

    if "\n" in raw:
        collapsed = collapsed.strip(" ")
    else:
        if first:
            collapsed = collapsed.lstrip(" ")
        if last:
            collapsed = collapsed.rstrip(" ")

    return html.unescape(collapsed)
