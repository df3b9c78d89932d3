"""Scoped slot emission.

Slot definitions passed to a component compile to descriptors resolved
by the runtime::

    scopedSlots:_u([{key:"header",fn:function(props){return ...}}])

The trailing arguments tell the runtime when the child component must
re-render: ``,null,true`` forces an update (the slot set may change
between renders), ``,null,false,<hash>`` keys the slot set by a content
hash so conditionally rendered hosts do not share stale slots.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rendergen.compiler.state import Stage
from rendergen.nodes.element import ElementNode
from rendergen.nodes.tree import EMPTY_SLOT_SCOPE_TOKEN

if TYPE_CHECKING:
    from collections.abc import Callable

    from rendergen.compiler.state import CodegenOptions
    from rendergen.nodes.base import Node
    from rendergen.nodes.tree import Tree


def slot_hash(text: str) -> int:
    """djb2-xor over UTF-16 code units, tail to head, as an unsigned 32-bit int.

    Examples:
        >>> slot_hash("")
        5381
        >>> slot_hash("a") == (5381 * 33) ^ 97
        True
    """
    units = text.encode("utf-16-le")
    h = 5381
    for i in range(len(units) - 2, -1, -2):
        h = ((h * 33) ^ (units[i] | units[i + 1] << 8)) & 0xFFFFFFFF
    return h


def contains_slot_child(node: Node) -> bool:
    if not isinstance(node, ElementNode):
        return False
    if node.tag == "slot":
        return True
    return any(contains_slot_child(child) for child in node.children)


class ScopedSlotsMixin:
    """Mixin for emitting ``scopedSlots:`` entries.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        options: CodegenOptions
        tree: Tree

        def gen_element(self, el: ElementNode, done: Stage = Stage.UNVISITED) -> str: ...

        def gen_children(self, el: ElementNode, check_skip: bool = False) -> str: ...

        def gen_if(
            self,
            el: ElementNode,
            done: Stage = Stage.UNVISITED,
            alt_gen: Callable[[ElementNode, Stage], str] | None = None,
            alt_empty: str | None = None,
        ) -> str: ...

        def gen_for(
            self,
            el: ElementNode,
            done: Stage = Stage.UNVISITED,
            alt_gen: Callable[[ElementNode, Stage], str] | None = None,
        ) -> str: ...

    def gen_scoped_slots(self, el: ElementNode, slots: dict[str, ElementNode]) -> str:
        # Slots that can appear, disappear or be renamed between renders
        # force the child to update.
        force_update = el.has_for or any(
            slot.slot_target_dynamic
            or slot.if_expr
            or slot.has_for
            or contains_slot_child(slot)
            for slot in slots.values()
        )
        # A conditional host may be reused for a different branch; a hash of
        # the slot content tells the branches apart.
        needs_key = bool(el.if_expr)

        if not force_update:
            for ancestor in self.tree.ancestors(el):
                scope = ancestor.slot_scope
                if (scope and scope != EMPTY_SLOT_SCOPE_TOKEN) or ancestor.has_for:
                    force_update = True
                    break
                if ancestor.if_expr:
                    needs_key = True

        generated = ",".join(self.gen_scoped_slot(slot) for slot in slots.values())
        code = f"scopedSlots:{self.options.intrinsics.resolve_scoped_slots}([{generated}]"
        if force_update:
            code += ",null,true"
        elif needs_key:
            code += f",null,false,{slot_hash(generated)}"
        return code + ")"

    def gen_scoped_slot(self, el: ElementNode, done: Stage = Stage.UNVISITED) -> str:
        is_legacy_syntax = bool(el.attrs_map.get("slot-scope"))
        if el.if_expr and not done & Stage.BRANCHED and not is_legacy_syntax:
            return self.gen_if(el, done, self.gen_scoped_slot, "null")
        if el.has_for and not done & Stage.LOOPED:
            return self.gen_for(el, done, self.gen_scoped_slot)

        scope = el.slot_scope
        slot_scope = "" if scope is None or scope == EMPTY_SLOT_SCOPE_TOKEN else scope
        if el.tag == "template":
            children = self.gen_children(el) or "undefined"
            if el.if_expr and is_legacy_syntax:
                body = f"({el.if_expr})?{children}:undefined"
            else:
                body = children
        else:
            body = self.gen_element(el, done)
        fn = f"function({slot_scope}){{return {body}}}"
        # Scope-less slots are also exposed as plain $slots
        reverse_proxy = "" if slot_scope else ",proxy:true"
        key = el.slot_target or '"default"'
        return f"{{key:{key},fn:{fn}{reverse_proxy}}}"
