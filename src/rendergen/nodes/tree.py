"""Index-addressed arena owning every node of one template tree.

Elements own their children directly; upward links are arena indices.
The arena also offers builder methods used by parsers, tests and the
dict loader::

    >>> tree = Tree()
    >>> ul = tree.element("ul")
    >>> li = tree.element("li", ul, for_source="items", alias="item", key="item.id")
    >>> name = tree.expression("_s(item.name)", li)
    >>> tree.root is ul
    True

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, cast

from rendergen.nodes.base import Node
from rendergen.nodes.element import Attr, ElementNode, IfCondition
from rendergen.nodes.text import CommentNode, ExpressionNode, TextNode

# Scope name recorded for v-slot without a scope binding
EMPTY_SLOT_SCOPE_TOKEN = "_empty_"


class Tree:
    """Arena of nodes for a single compile.

    Attributes:
        root: Root element, or None for an empty template.

    """

    __slots__ = ("_nodes", "root")

    def __init__(self, root: ElementNode | None = None) -> None:
        self._nodes: list[Node] = []
        self.root: ElementNode | None = None
        if root is not None:
            self.adopt(root)
            self.root = root

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __getitem__(self, index: int) -> Node:
        return self._nodes[index]

    # ─────────────────────────────────────────────────────────────────────
    # Upward lookups
    # ─────────────────────────────────────────────────────────────────────

    def parent_of(self, node: Node) -> ElementNode | None:
        if node.parent is None:
            return None
        return cast(ElementNode, self._nodes[node.parent])

    def ancestors(self, node: Node) -> Iterator[ElementNode]:
        """Yield strict ancestors, nearest first."""
        parent = self.parent_of(node)
        while parent is not None:
            yield parent
            parent = self.parent_of(parent)

    # ─────────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────────

    def adopt(self, node: Node, parent: ElementNode | None = None) -> Node:
        """Register ``node`` in the arena under ``parent`` without attaching it."""
        node.index = len(self._nodes)
        node.parent = parent.index if parent is not None else None
        self._nodes.append(node)
        return node

    def _attach(self, node: Node, parent: ElementNode | None) -> None:
        self.adopt(node, parent)
        if parent is not None:
            parent.children.append(node)
        elif self.root is None and isinstance(node, ElementNode):
            self.root = node

    def element(
        self,
        tag: str,
        parent: ElementNode | None = None,
        *,
        attrs: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        **fields: Any,
    ) -> ElementNode:
        """Create an element and append it to ``parent.children``.

        ``attrs`` fills the raw attribute list and map. ``plain`` is derived
        the way the parser derives it (no key, no scoped slots and no raw
        attributes) unless given explicitly. Passing ``if_expr`` seeds the
        condition list with the element itself.
        """
        node = self._build_element(tag, attrs, fields)
        self._attach(node, parent)
        return node

    def branch(
        self,
        owner: ElementNode,
        tag: str,
        expression: str | None = None,
        *,
        attrs: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        **fields: Any,
    ) -> ElementNode:
        """Create a v-else-if (``expression``) or v-else branch of ``owner``.

        Branch blocks share the owner's parent but are not children of it.
        """
        if expression is not None:
            fields.setdefault("else_if", expression)
        else:
            fields.setdefault("is_else", True)
        node = self._build_element(tag, attrs, fields)
        self.adopt(node, self.parent_of(owner))
        add_if_condition(owner, IfCondition(expression, node))
        return node

    def scoped_slot(
        self,
        host: ElementNode,
        target: str = '"default"',
        *,
        tag: str = "template",
        scope: str = EMPTY_SLOT_SCOPE_TOKEN,
        dynamic: bool = False,
        attrs: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        **fields: Any,
    ) -> ElementNode:
        """Create a slot definition registered in ``host.scoped_slots``.

        ``target`` is the slot name expression (a quoted literal unless
        ``dynamic``).
        """
        fields.setdefault("slot_target", target)
        fields.setdefault("slot_target_dynamic", dynamic)
        fields.setdefault("slot_scope", scope)
        node = self._build_element(tag, attrs, fields)
        self.adopt(node, host)
        if host.scoped_slots is None:
            host.scoped_slots = {}
        host.scoped_slots[target] = node
        host.plain = False
        return node

    def text(self, text: str, parent: ElementNode, **fields: Any) -> TextNode:
        node = TextNode(text=text, **fields)
        self._attach(node, parent)
        return node

    def expression(
        self, expression: str, parent: ElementNode, **fields: Any
    ) -> ExpressionNode:
        node = ExpressionNode(expression=expression, **fields)
        self._attach(node, parent)
        return node

    def comment(self, text: str, parent: ElementNode, **fields: Any) -> CommentNode:
        node = CommentNode(text=text, **fields)
        self._attach(node, parent)
        return node

    @staticmethod
    def _build_element(
        tag: str,
        attrs: Mapping[str, str] | Iterable[tuple[str, str]] | None,
        fields: dict[str, Any],
    ) -> ElementNode:
        pairs = list(attrs.items() if isinstance(attrs, Mapping) else attrs or ())
        attrs_list = [Attr(name, value) for name, value in pairs]
        fields.setdefault("attrs_list", attrs_list)
        fields.setdefault("attrs_map", {a.name: a.value for a in attrs_list})
        fields.setdefault("raw_attrs_map", {a.name: a for a in attrs_list})
        node = ElementNode(tag=tag, **fields)
        if "plain" not in fields:
            node.plain = not node.key and not node.scoped_slots and not node.attrs_list
        if node.if_expr and node.if_conditions is None:
            node.if_conditions = [IfCondition(node.if_expr, node)]
        return node


def add_if_condition(node: ElementNode, condition: IfCondition) -> None:
    if node.if_conditions is None:
        node.if_conditions = []
    node.if_conditions.append(condition)
