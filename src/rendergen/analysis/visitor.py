"""Shared traversal helpers for the analyzer and code generator."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from rendergen.nodes.element import ElementNode

if TYPE_CHECKING:
    from rendergen.nodes.base import Node
    from rendergen.nodes.tree import Tree


def branch_blocks(node: ElementNode) -> Iterator[ElementNode]:
    """Yield the v-else-if / v-else blocks of ``node``.

    The first condition block is the node itself and is skipped.
    """
    conditions = node.if_conditions
    if not conditions:
        return
    for i in range(1, len(conditions)):
        yield conditions[i].block


def walk(tree: Tree) -> Iterator[Node]:
    """Yield every node reachable from the root, pre-order.

    Children come first, then branch blocks, then scoped slot definitions.
    """
    if tree.root is None:
        return
    stack: list[Node] = [tree.root]
    while stack:
        node = stack.pop()
        yield node
        if not isinstance(node, ElementNode):
            continue
        pending: list[Node] = list(node.children)
        pending.extend(branch_blocks(node))
        if node.scoped_slots:
            pending.extend(node.scoped_slots.values())
        stack.extend(reversed(pending))
