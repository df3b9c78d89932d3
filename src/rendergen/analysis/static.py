"""Static subtree detection.

Two passes over the tree:

1. `mark_static` flags every node that can never change between renders.
2. `mark_static_roots` promotes static elements with real content to
   static roots, which code generation hoists into their own render
   functions and the runtime reuses across renders and skips when patching.

Scoped slot definitions are not visited; slot bodies are generated
through their own functions and never hoisted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import cast

from rendergen.analysis.visitor import branch_blocks, walk
from rendergen.nodes.base import Node
from rendergen.nodes.element import ElementNode
from rendergen.nodes.text import CommentNode, ExpressionNode, TextNode
from rendergen.nodes.tree import Tree
from rendergen.utils.constants import is_built_in_tag, is_reserved_tag

logger = logging.getLogger(__name__)

# Element fields that never make a node dynamic on their own
BASE_STATIC_KEYS = frozenset(
    {
        "tag",
        "attrs_list",
        "attrs_map",
        "raw_attrs_map",
        "plain",
        "children",
        "attrs",
        "start",
        "end",
    }
)


class StaticAnalyzer:
    """Annotates ``static``, ``static_root`` and ``static_in_for`` in place.

    Running the analyzer again over an annotated tree yields the same
    flags: analysis outputs are never consulted when classifying a node.

    Example:
        >>> tree = Tree()
        >>> div = tree.element("div")
        >>> p = tree.element("p", div)
        >>> _ = tree.text("hello", p)
        >>> StaticAnalyzer().optimize(tree)
        >>> div.static_root
        True

    """

    __slots__ = ("_is_reserved_tag", "_static_keys", "_tree")

    def __init__(
        self,
        is_reserved_tag: Callable[[str], bool] = is_reserved_tag,
        static_keys: Iterable[str] = (),
    ) -> None:
        self._is_reserved_tag = is_reserved_tag
        self._static_keys = BASE_STATIC_KEYS | frozenset(static_keys)
        self._tree: Tree | None = None

    def optimize(self, tree: Tree) -> None:
        root = tree.root
        if root is None:
            return
        self._tree = tree
        try:
            self.mark_static(root)
            self.mark_static_roots(root, False)
        finally:
            self._tree = None
        if logger.isEnabledFor(logging.DEBUG):
            roots = sum(
                1 for node in walk(tree) if isinstance(node, ElementNode) and node.static_root
            )
            logger.debug("Static analysis marked %d static root(s)", roots)

    # ─────────────────────────────────────────────────────────────────────
    # Classification
    # ─────────────────────────────────────────────────────────────────────

    def is_static(self, node: Node) -> bool:
        if not isinstance(node, ElementNode):
            # Text and comments never change; interpolations always may
            return not isinstance(node, ExpressionNode)
        if node.pre:
            return True
        return (
            not node.has_bindings
            and not node.if_expr
            and not node.for_source
            and not is_built_in_tag(node.tag)
            and self._is_reserved_tag(node.tag)
            and not self._is_direct_child_of_template_for(node)
            and all(key in self._static_keys for key in node.populated_keys())
        )

    def _is_direct_child_of_template_for(self, node: ElementNode) -> bool:
        tree = cast(Tree, self._tree)
        for ancestor in tree.ancestors(node):
            if ancestor.tag != "template":
                return False
            if ancestor.for_source:
                return True
        return False

    # ─────────────────────────────────────────────────────────────────────
    # Passes
    # ─────────────────────────────────────────────────────────────────────

    def mark_static(self, node: Node) -> None:
        node.static = self.is_static(node)
        if not isinstance(node, ElementNode):
            return
        # Component slot content stays dynamic so the child component can
        # react to changes of what it receives.
        if (
            not self._is_reserved_tag(node.tag)
            and node.tag != "slot"
            and node.attrs_map.get("inline-template") is None
        ):
            return
        for child in node.children:
            self.mark_static(child)
            if not child.static:
                node.static = False
        for block in branch_blocks(node):
            self.mark_static(block)
            if not block.static:
                node.static = False

    def mark_static_roots(self, node: Node, in_for: bool) -> None:
        if not isinstance(node, ElementNode):
            return
        if node.static or node.once:
            node.static_in_for = in_for
        children = node.children
        # A lone text child costs more to hoist than to re-render
        if (
            node.static
            and children
            and not (len(children) == 1 and isinstance(children[0], (TextNode, CommentNode)))
        ):
            node.static_root = True
            return
        node.static_root = False
        for child in children:
            self.mark_static_roots(child, in_for or node.has_for)
        for block in branch_blocks(node):
            self.mark_static_roots(block, in_for)


def optimize(
    tree: Tree,
    *,
    is_reserved_tag: Callable[[str], bool] = is_reserved_tag,
    static_keys: Iterable[str] = (),
) -> None:
    """Run static analysis over ``tree`` in place."""
    StaticAnalyzer(is_reserved_tag, static_keys).optimize(tree)
