"""Greedy word wrapping with ellipsis truncation."""

from collections.abc import Callable

ELLIPSIS = "…"


def wrap_text(
    text: str,
    measure: Callable[[str], float],
    max_width: float,
    max_lines: int,
) -> list[str]:
    """Wrap text into at most ``max_lines`` lines that fit ``max_width``.

    Words are appended to the running line while the measured candidate
    fits; a word that would overflow a non-empty line starts a new one.
    A single word wider than the budget is never split and stays on its own
    line. If words were left over after ``max_lines`` lines, the last kept
    line is shortened one character at a time until it plus an ellipsis
    fits, and the ellipsis is appended.

    Args:
        text: Raw text; internal whitespace is collapsed and the ends trimmed
        measure: Returns the rendered width of a string
        max_width: Width budget in the same units as ``measure``
        max_lines: Maximum number of lines (values below 1 are treated as 1)

    Returns:
        The lines to draw, top to bottom (empty for blank input)
    """
    normalized = " ".join(text.split())
    if not normalized:
        return []

    lines: list[str] = []
    line = ""
    for word in normalized.split(" "):
        candidate = f"{line} {word}" if line else word
        if measure(candidate) > max_width and line:
            lines.append(line)
            line = word
        else:
            line = candidate
    if line:
        lines.append(line)

    limit = max(1, int(max_lines))
    bounded = lines[:limit]

    if len(lines) > limit:
        last = bounded[-1]
        while measure(f"{last}{ELLIPSIS}") > max_width and last:
            last = last[:-1]
        bounded[-1] = f"{last}{ELLIPSIS}"

    return bounded
