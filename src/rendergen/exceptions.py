"""Diagnostics and exceptions for rendergen.

Code generation never aborts: anomalies are reported as `Diagnostic`
records through the compile's warn sink and the compile still returns a
result. Exceptions are reserved for invalid input handed to the package
from outside the compile (malformed tree data, bad plugin registration).

Exception Hierarchy:
CompilerError (base)
├── TreeStructureError    # Tree data that cannot be loaded
└── PluginError           # Plugin that does not satisfy its contract

Diagnostic output:
    ```
    R-GEN-001: v-once can only be used inside v-for that is keyed.
         |
    >  1 | <li v-for="i in items"><b v-once>{{ i }}</b></li>
         |                           ^^^^^^
         |
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rendergen.utils import terminal


class ErrorCode(Enum):
    """Searchable diagnostic codes.

    Format: R-{CATEGORY}-{NUMBER}
    Categories: GEN (code generation), DIR (directive plugins),
    TRE (tree input), PLG (plugin registration)
    """

    # Code generation (R-GEN-xxx)
    GENERIC = "R-GEN-000"
    ONCE_WITHOUT_KEY = "R-GEN-001"
    INLINE_TEMPLATE_CHILDREN = "R-GEN-002"
    LIST_WITHOUT_KEY = "R-GEN-003"

    # Directive plugins (R-DIR-xxx)
    ON_OBJECT_MODIFIERS = "R-DIR-001"
    MODEL_UNSUPPORTED = "R-DIR-002"
    MODEL_FILE_INPUT = "R-DIR-003"
    PASSIVE_PREVENT = "R-DIR-004"

    # Tree input (R-TRE-xxx)
    UNKNOWN_NODE_TYPE = "R-TRE-001"
    MISSING_FIELD = "R-TRE-002"

    # Plugin registration (R-PLG-xxx)
    INVALID_PLUGIN = "R-PLG-001"

    @property
    def category(self) -> str:
        """Code category (e.g. 'codegen', 'directive')."""
        prefix = self.value.split("-")[1]
        return {
            "GEN": "codegen",
            "DIR": "directive",
            "TRE": "tree",
            "PLG": "plugin",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source lines around a diagnostic span.

    Attributes:
        lines: (line_number, content) pairs around the error.
        error_line: 1-based line holding the span start.
        column: 0-based column of the span start on that line.
        width: Span width on the error line (at least 1).
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int
    width: int = 1

    def format(self) -> str:
        parts: list[str] = [terminal.dim_text("     |")]
        for lineno, content in self.lines:
            is_error = lineno == self.error_line
            parts.append(terminal.format_source_line(lineno, content, is_error=is_error))
            if is_error:
                parts.append(terminal.format_caret_line(self.column, self.width))
        parts.append(terminal.dim_text("     |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    start: int,
    end: int | None = None,
    *,
    context_lines: int = 2,
) -> SourceSnippet:
    """Build a snippet for the ``[start, end)`` character span of ``source``.

    The caret underline is clipped to the line holding ``start``.
    """
    start = max(0, min(start, len(source)))
    error_line = source.count("\n", 0, start) + 1
    line_start = source.rfind("\n", 0, start) + 1
    line_end = source.find("\n", start)
    if line_end == -1:
        line_end = len(source)
    column = start - line_start
    stop = line_end if end is None else min(max(end, start + 1), line_end)
    width = max(1, stop - start)

    all_lines = source.splitlines()
    first = max(0, error_line - 1 - context_lines)
    last = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(first, last))
    return SourceSnippet(lines=lines, error_line=error_line, column=column, width=width)


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One advisory message produced while compiling.

    ``tip`` diagnostics are suggestions; the others indicate template
    mistakes that were worked around. Neither stops compilation.
    """

    message: str
    code: ErrorCode = ErrorCode.GENERIC
    start: int | None = None
    end: int | None = None
    tip: bool = False

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def format(self, source: str | None = None, name: str | None = None) -> str:
        """Render the diagnostic, with a source snippet when ``source`` is given."""
        parts = [f"{terminal.error_code(self.code.value, self.tip)}: {self.message}"]
        if name:
            parts.append(f"  --> {terminal.location(name)}")
        if source and self.start is not None:
            parts.append(build_source_snippet(source, self.start, self.end).format())
        return "\n".join(parts)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CompilerError(Exception):
    """Base exception for rendergen.

    Attributes:
        code: Optional ErrorCode for searchable identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a one-line ``CODE: message`` summary."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TreeStructureError(CompilerError):
    """Tree data handed to the loader does not describe a valid tree.

    Example:
        >>> tree_from_dict({"type": 7})
        Traceback (most recent call last):
        ...
        rendergen.exceptions.TreeStructureError: unknown node type 7 at $

    """

    code: ErrorCode | None = ErrorCode.MISSING_FIELD

    def __init__(self, message: str, path: str = "$", code: ErrorCode | None = None):
        self.message = message
        self.path = path
        if code is not None:
            self.code = code
        super().__init__(f"{message} at {path}")


class PluginError(CompilerError):
    """A directive or module plugin does not implement its capability."""

    code: ErrorCode | None = ErrorCode.INVALID_PLUGIN
