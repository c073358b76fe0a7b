import re
from typing import List, NamedTuple

_LINE_BREAK = re.compile(r"\r\n?")


class Line(NamedTuple):
    """One non-blank physical line of Emblem source."""
    indent_width: int
    content: str
    line_number: int  # 1-based, counted in the original source


def preprocess(source: str) -> List[Line]:
    """
    Splits source into content lines.

    Line endings are normalized first. Blank and whitespace-only lines are
    dropped entirely, so they never take part in indentation comparisons.
    Every leading whitespace character counts as one column.
    """
    lines: List[Line] = []
    for index, raw in enumerate(_LINE_BREAK.sub("\n", source).split("\n")):
        content = raw.strip()
        if not content:
            continue
        indent_width = len(raw) - len(raw.lstrip())
        lines.append(Line(indent_width, content, index + 1))
    return lines
