"""Text, interpolation and comment nodes."""

from __future__ import annotations

from dataclasses import dataclass

from rendergen.nodes.base import Node


@dataclass(eq=False, slots=True, kw_only=True)
class TextNode(Node):
    """Literal text between tags. Always static."""

    text: str


@dataclass(eq=False, slots=True, kw_only=True)
class ExpressionNode(Node):
    """Interpolation: {{ expr }}

    ``expression`` is the runtime expression text as produced by the parser
    (already wrapped in the to-string intrinsic). ``text`` keeps the raw
    source for diagnostics.
    """

    expression: str
    text: str = ""


@dataclass(eq=False, slots=True, kw_only=True)
class CommentNode(Node):
    """Preserved HTML comment. Always static."""

    text: str
