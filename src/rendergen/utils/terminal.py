"""ANSI colors for diagnostic output.

Honors NO_COLOR (https://no-color.org/) and FORCE_COLOR, and only colors
output written to a TTY.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
    "bright_yellow": "\033[93m",
}

ColorName = Literal["reset", "bold", "dim", "yellow", "cyan", "bright_red", "bright_yellow"]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stderr.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Wrap ``text`` in the given colors, or return it unchanged when disabled."""
    if not _USE_COLORS or not colors:
        return text
    prefix = "".join(_COLORS[color] for color in colors)
    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


def error_code(text: str, tip: bool = False) -> str:
    """Color a diagnostic code: red for errors, yellow for tips."""
    return colorize(text, "bright_yellow" if tip else "bright_red", "bold")


def location(text: str) -> str:
    return colorize(text, "cyan")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """Format one numbered source line, highlighting the offending one.

    Example:
        >>> strip_colors(format_source_line(3, "<li v-once>", is_error=True))
        '>  3 | <li v-once>'
    """
    marker = ">" if is_error else " "
    number = colorize(f"{marker}{lineno:>3}", "yellow")
    body = colorize(content, "bright_red") if is_error else dim_text(content)
    return f"{number} | {body}"


def format_caret_line(column: int, width: int = 1) -> str:
    """Format the underline row that points at a span of the error line."""
    return f"{dim_text('     |')} {colorize(' ' * column + '^' * max(width, 1), 'bright_red')}"
