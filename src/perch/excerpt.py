"""Source excerpts for the source view and the template error page."""

import html
import re

_NEWLINE = re.compile(r"\r\n|\r|\n")


def format_code_block(
    code: str,
    with_line_numbers: bool = True,
    highlight_line: int = 0,
    context_lines: int = 4,
) -> list[str]:
    """Format source code as escaped HTML lines.

    When *highlight_line* is positive, only the lines within
    *context_lines* of it are returned and that line is wrapped in
    ``<mark>``. Line numbers are emitted as empty ``data-num`` spans so
    the stylesheet can render them without them being copied along
    with the code.

    Args:
        code: Raw source text.
        with_line_numbers: Prefix each line with a ``data-num`` marker.
        highlight_line: 1-based line to mark, or 0 for the whole file.
        context_lines: Lines shown before and after the marked line.

    Returns:
        The formatted lines, in document order.
    """
    lines = _NEWLINE.split(html.escape(code, quote=True))

    # 1-based, inclusive
    start = 1
    end = len(lines)
    if highlight_line > 0:
        highlight_line = min(end, highlight_line)
        start = max(1, highlight_line - context_lines)
        end = min(end, highlight_line + context_lines)

    excerpt: list[str] = []
    for lineno in range(start, end + 1):
        text = lines[lineno - 1]
        marker = ""
        # No number on a dangling empty last line
        if with_line_numbers and (lineno < end or text != ""):
            marker = f'<span data-num="{lineno}"></span>'
        if lineno == highlight_line:
            excerpt.append(f"{marker}<mark>{text}</mark>")
        else:
            excerpt.append(marker + text)
    return excerpt
