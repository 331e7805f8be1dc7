"""Syntax error diagnostics
---

Show where a parse failed by printing the source line with a caret under the
offending character:

```
2 + (3 * 4
          ^
```
"""
from typing import Tuple

from colr import color


def locate(text: str, position: int) -> Tuple[str, int]:
    """Find the source line that contains `position` and the column of
    `position` inside of it."""
    position = max(0, min(position, len(text)))
    start = text.rfind("\n", 0, position) + 1
    end = text.find("\n", position)
    if end == -1:
        end = len(text)
    return text[start:end], position - start


def format_error(text: str, position: int, colored: bool = False) -> str:
    """Format a two line diagnostic with the source text and a marker line that
    points at `position`.

    # Arguments
    text (str): The source text that failed to parse.
    position (int): The offset of the offending character.
    colored (bool): Highlight the caret with terminal color codes.

    # Returns
    (str): The source line and the marker line joined by a newline.
    """
    line, column = locate(text, position)
    # Keep tabs so the caret lines up with what the terminal shows
    padding = "".join(ch if ch == "\t" else " " for ch in line[:column])
    caret = color("^", fore="red", style="bright") if colored else "^"
    return f"{line}\n{padding}{caret}"
