"""Structural code generation: the element dispatcher and child lists.

`gen_element` applies the first matching stage in precedence order:

1. static root → hoisted into a static render function, ``_m(i)``
2. ``v-once`` → memoized with ``_o`` inside keyed loops, hoisted otherwise
3. ``v-for`` → ``_l((source),function(alias){return ...})``
4. ``v-if`` → ternary chain over the condition list
5. ``<template>`` → its children, no wrapper element
6. ``<slot>`` outlet → ``_t(name,...)``
7. element or component → ``_c(tag,data,children)``

Stages re-dispatch on the same node with the stage recorded in ``done``,
so a node with ``v-for`` and ``v-if`` emits the loop wrapping the
conditional wrapping the element.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, cast

from rendergen.compiler.data import gen_props
from rendergen.compiler.state import Stage
from rendergen.exceptions import ErrorCode
from rendergen.nodes.element import Attr, ElementNode
from rendergen.nodes.text import CommentNode, ExpressionNode, TextNode
from rendergen.utils.code import camelize, js_json, transform_special_newlines

if TYPE_CHECKING:
    from rendergen.compiler.state import CodegenOptions, CodegenState
    from rendergen.nodes.base import Node
    from rendergen.nodes.tree import Tree
    from rendergen.plugins.base import WarnFunc

AltGen = Callable[[ElementNode, Stage], str]


def _needs_normalization(el: ElementNode) -> bool:
    return el.has_for or el.tag in ("template", "slot")


class StructureMixin:
    """Mixin for the recursive element dispatcher.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        options: CodegenOptions
        state: CodegenState
        tree: Tree
        warn: WarnFunc

        def is_pre(self, el: ElementNode) -> bool: ...

        def maybe_component(self, el: ElementNode) -> bool: ...

        def gen_data(self, el: ElementNode) -> str: ...

    # ─────────────────────────────────────────────────────────────────────────
    # Dispatcher
    # ─────────────────────────────────────────────────────────────────────────

    def gen_element(self, el: ElementNode, done: Stage = Stage.UNVISITED) -> str:
        if el.static_root and not done & Stage.HOISTED:
            return self.gen_static(el, done)
        if el.once and not done & Stage.ONCE:
            return self.gen_once(el, done)
        if el.has_for and not done & Stage.LOOPED:
            return self.gen_for(el, done)
        if el.if_expr and not done & Stage.BRANCHED:
            return self.gen_if(el, done)
        if el.tag == "template" and not el.slot_target and not self.state.pre:
            return self.gen_children(el) or "void 0"
        if el.tag == "slot":
            return self.gen_slot(el)

        if el.component:
            code = self.gen_component(el.component, el)
        else:
            data = ""
            if not el.plain or (self.is_pre(el) and self.maybe_component(el)):
                data = self.gen_data(el)
            children = "" if el.inline_template else self.gen_children(el, True)
            code = f"{self.options.intrinsics.create}('{el.tag}'"
            if data:
                code += f",{data}"
            if children:
                code += f",{children}"
            code += ")"
        for module in self.options.modules:
            code = module.transform_output(el, code)
        return code

    # ─────────────────────────────────────────────────────────────────────────
    # Stages
    # ─────────────────────────────────────────────────────────────────────────

    def gen_static(self, el: ElementNode, done: Stage = Stage.UNVISITED) -> str:
        """Hoist ``el`` into its own render function."""
        state = self.state
        original_pre = state.pre
        if self.is_pre(el):
            state.pre = True
        code = self.gen_element(el, done | Stage.HOISTED)
        state.static_render_fns.append(f"with(this){{return {code}}}")
        state.pre = original_pre
        index = len(state.static_render_fns) - 1
        in_for = ",true" if el.static_in_for else ""
        return f"{self.options.intrinsics.render_static}({index}{in_for})"

    def gen_once(self, el: ElementNode, done: Stage = Stage.UNVISITED) -> str:
        done |= Stage.ONCE
        if el.if_expr and not done & Stage.BRANCHED:
            return self.gen_if(el, done)
        if not el.static_in_for:
            return self.gen_static(el, done)

        key = None
        for ancestor in self.tree.ancestors(el):
            if ancestor.has_for:
                key = ancestor.key
                break
        if not key:
            self.warn(
                "v-once can only be used inside v-for that is keyed. ",
                el.raw_attrs_map.get("v-once") or el,
                code=ErrorCode.ONCE_WITHOUT_KEY,
            )
            return self.gen_element(el, done)
        code = self.gen_element(el, done)
        return f"{self.options.intrinsics.mark_once}({code},{self.state.next_once_id()},{key})"

    def gen_if(
        self,
        el: ElementNode,
        done: Stage = Stage.UNVISITED,
        alt_gen: AltGen | None = None,
        alt_empty: str | None = None,
    ) -> str:
        done |= Stage.BRANCHED
        conditions = el.if_conditions or []
        empty = alt_empty or f"{self.options.intrinsics.empty}()"

        def branch(block: ElementNode) -> str:
            # Only the owner has been through the stages so far
            block_done = done if block is el else Stage.UNVISITED
            if alt_gen is not None:
                return alt_gen(block, block_done)
            if block.once:
                return self.gen_once(block, block_done)
            return self.gen_element(block, block_done)

        def chain(position: int) -> str:
            if position >= len(conditions):
                return empty
            condition = conditions[position]
            if condition.expression:
                return f"({condition.expression})?{branch(condition.block)}:{chain(position + 1)}"
            return branch(condition.block)

        return chain(0)

    def gen_for(
        self,
        el: ElementNode,
        done: Stage = Stage.UNVISITED,
        alt_gen: AltGen | None = None,
        alt_helper: str | None = None,
    ) -> str:
        source = el.for_source
        alias = el.alias
        iterator1 = f",{el.iterator1}" if el.iterator1 else ""
        iterator2 = f",{el.iterator2}" if el.iterator2 else ""

        if self.maybe_component(el) and el.tag not in ("slot", "template") and not el.key:
            self.warn(
                f'<{el.tag} v-for="{alias} in {source}">: component lists rendered with '
                "v-for should have explicit keys. "
                "See https://vuejs.org/guide/list.html#key for more info.",
                el.raw_attrs_map.get("v-for") or el,
                tip=True,
                code=ErrorCode.LIST_WITHOUT_KEY,
            )

        done |= Stage.LOOPED
        body = (alt_gen or self.gen_element)(el, done)
        helper = alt_helper or self.options.intrinsics.render_list
        return f"{helper}(({source}),function({alias}{iterator1}{iterator2}){{return {body}}})"

    # ─────────────────────────────────────────────────────────────────────────
    # Children
    # ─────────────────────────────────────────────────────────────────────────

    def gen_children(self, el: ElementNode, check_skip: bool = False) -> str:
        """Emit the children argument, or "" when there are none.

        With ``check_skip`` the runtime normalization level is appended:
        0 (none), 1 (flatten component results) or 2 (full normalization
        for nested arrays from loops, templates and slots).
        """
        children = el.children
        if not children:
            return ""
        first = children[0]
        if (
            len(children) == 1
            and isinstance(first, ElementNode)
            and first.has_for
            and first.tag not in ("template", "slot")
        ):
            normalization = ""
            if check_skip:
                normalization = ",1" if self.maybe_component(first) else ",0"
            return f"{self.gen_element(first)}{normalization}"

        level = self.get_normalization_type(children) if check_skip else 0
        code = "[" + ",".join(self.gen_node(child) for child in children) + "]"
        if level:
            code += f",{level}"
        return code

    def get_normalization_type(self, children: Sequence[Node]) -> int:
        level = 0
        for child in children:
            if not isinstance(child, ElementNode):
                continue
            blocks = [c.block for c in child.if_conditions or ()]
            if _needs_normalization(child) or any(_needs_normalization(b) for b in blocks):
                return 2
            if self.maybe_component(child) or any(self.maybe_component(b) for b in blocks):
                level = 1
        return level

    def gen_node(self, node: Node) -> str:
        if isinstance(node, ElementNode):
            return self.gen_element(node)
        if isinstance(node, CommentNode):
            return self.gen_comment(node)
        return self.gen_text(cast("TextNode | ExpressionNode", node))

    def gen_text(self, node: TextNode | ExpressionNode) -> str:
        if isinstance(node, ExpressionNode):
            value = node.expression
        else:
            value = transform_special_newlines(js_json(node.text))
        return f"{self.options.intrinsics.text}({value})"

    def gen_comment(self, node: CommentNode) -> str:
        return f"{self.options.intrinsics.empty}({js_json(node.text)})"

    # ─────────────────────────────────────────────────────────────────────────
    # Slot outlets and components
    # ─────────────────────────────────────────────────────────────────────────

    def gen_slot(self, el: ElementNode) -> str:
        i = self.options.intrinsics
        slot_name = el.slot_name or '"default"'
        children = self.gen_children(el)
        code = f"{i.render_slot}({slot_name}"
        if children:
            code += f",function(){{return {children}}}"

        props = ""
        if el.attrs is not None or el.dynamic_attrs is not None:
            props = gen_props(
                [
                    Attr(camelize(attr.name), attr.value, attr.dynamic)
                    for attr in [*(el.attrs or ()), *(el.dynamic_attrs or ())]
                ],
                i.bind_dynamic_keys,
            )
        bind = el.attrs_map.get("v-bind")
        if (props or bind) and not children:
            code += ",null"
        if props:
            code += f",{props}"
        if bind:
            code += f"{'' if props else ',null'},{bind}"
        return code + ")"

    def gen_component(self, component_name: str, el: ElementNode) -> str:
        """``<component :is="...">``: data is always emitted."""
        children = "" if el.inline_template else self.gen_children(el, True)
        code = f"{self.options.intrinsics.create}({component_name},{self.gen_data(el)}"
        if children:
            code += f",{children}"
        return code + ")"
