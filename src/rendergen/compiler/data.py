"""Data object emission.

The data object is the second argument of the create intrinsic. Keys are
emitted in a fixed order so generated code is stable across compiles:

    directives, key, ref, refInFor, pre, tag, <module data>, attrs,
    domProps, on, nativeOn, slot, scopedSlots, model, inlineTemplate

Directive plugins run first because they may add props, attrs or
listeners to the element being emitted.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rendergen.compiler.events import gen_handlers
from rendergen.exceptions import ErrorCode
from rendergen.nodes.element import Attr, ElementNode
from rendergen.utils.code import js_json, transform_special_newlines

if TYPE_CHECKING:
    from rendergen.compiler.state import CodegenOptions, CodegenState
    from rendergen.nodes.tree import Tree
    from rendergen.plugins.base import WarnFunc


def gen_props(props: Sequence[Attr], bind_dynamic_keys: str = "_d") -> str:
    """Emit ``{"name":value,...}``, or ``_d({...},[name,value,...])`` when
    any entry has a dynamic name."""
    static_props: list[str] = []
    dynamic_props: list[str] = []
    for prop in props:
        value = transform_special_newlines(prop.value)
        if prop.dynamic:
            dynamic_props.append(f"{prop.name},{value}")
        else:
            static_props.append(f'"{prop.name}":{value}')
    static_code = "{" + ",".join(static_props) + "}"
    if dynamic_props:
        return f"{bind_dynamic_keys}({static_code},[{','.join(dynamic_props)}])"
    return static_code


# Element fields directive plugins may rewrite while the data object is built
_PLUGIN_FIELDS = (
    "attrs_list",
    "props",
    "attrs",
    "dynamic_attrs",
    "events",
    "native_events",
    "model",
    "wrap_data",
    "wrap_listeners",
    "plain",
)


def _detach_bindings(el: ElementNode) -> dict[str, Any]:
    """Give ``el`` private copies of its binding containers.

    Returns the original values so the caller can put them back once the
    data object is emitted, which keeps a compiled tree reusable.
    """
    originals = {name: getattr(el, name) for name in _PLUGIN_FIELDS}
    el.attrs_list = list(el.attrs_list)
    for name in ("props", "attrs", "dynamic_attrs"):
        value = getattr(el, name)
        if value is not None:
            setattr(el, name, list(value))
    for name in ("events", "native_events"):
        value = getattr(el, name)
        if value is not None:
            setattr(el, name, {event: list(handlers) for event, handlers in value.items()})
    return originals


class DataObjectMixin:
    """Mixin for emitting element data objects.

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

        def gen_scoped_slots(self, el: ElementNode, slots: dict[str, ElementNode]) -> str: ...

        def subcompile(self, root: ElementNode) -> Any: ...

    def gen_data(self, el: ElementNode) -> str:
        if not el.directives:
            return self._gen_data(el)
        originals = _detach_bindings(el)
        try:
            return self._gen_data(el)
        finally:
            for name, value in originals.items():
                setattr(el, name, value)

    def _gen_data(self, el: ElementNode) -> str:
        i = self.options.intrinsics
        data = "{"

        directives = self.gen_directives(el)
        if directives:
            data += directives + ","

        if el.key:
            data += f"key:{el.key},"
        if el.ref:
            data += f"ref:{el.ref},"
        if el.ref_in_for:
            data += "refInFor:true,"
        if self.is_pre(el):
            data += "pre:true,"
        # Record the original tag name for <component :is="...">
        if el.component:
            data += f'tag:"{el.tag}",'

        for module in self.options.modules:
            data += module.generate_module_data(el)

        if el.attrs:
            data += f"attrs:{gen_props(el.attrs, i.bind_dynamic_keys)},"
        if el.props:
            data += f"domProps:{gen_props(el.props, i.bind_dynamic_keys)},"
        if el.events:
            data += f"{gen_handlers(el.events, False, i)},"
        if el.native_events:
            data += f"{gen_handlers(el.native_events, True, i)},"
        # Only non-scoped slots go here; scoped ones live on the parent
        if el.slot_target and not el.slot_scope:
            data += f"slot:{el.slot_target},"
        if el.scoped_slots:
            data += f"{self.gen_scoped_slots(el, el.scoped_slots)},"
        if el.model:
            model = el.model
            data += (
                f"model:{{value:{model.value},"
                f"callback:{model.callback},"
                f"expression:{model.expression}}},"
            )
        if el.inline_template:
            inline_template = self.gen_inline_template(el)
            if inline_template:
                data += f"{inline_template},"

        data = data.removesuffix(",") + "}"

        if el.dynamic_attrs:
            data = (
                f'{i.bind_object_props}({data},"{el.tag}",'
                f"{gen_props(el.dynamic_attrs, i.bind_dynamic_keys)})"
            )
        if el.wrap_data is not None:
            data = el.wrap_data(data)
        if el.wrap_listeners is not None:
            data = el.wrap_listeners(data)
        return data

    def gen_directives(self, el: ElementNode) -> str:
        """Run directive plugins and emit the runtime ``directives:[...]`` list.

        Directives without a plugin always need their runtime counterpart.
        Returns "" when no directive needs one.
        """
        if not el.directives:
            return ""
        entries: list[str] = []
        for directive in el.directives:
            needs_runtime = True
            plugin = self.options.directives.get(directive.name)
            if plugin is not None:
                needs_runtime = bool(plugin.compile_directive(el, directive, self.warn))
            if not needs_runtime:
                continue
            entry = f'{{name:"{directive.name}",rawName:"{directive.raw_name}"'
            if directive.value:
                entry += f",value:({directive.value}),expression:{js_json(directive.value)}"
            if directive.arg:
                arg = directive.arg if directive.is_dynamic_arg else f'"{directive.arg}"'
                entry += f",arg:{arg}"
            if directive.modifiers is not None:
                entry += f",modifiers:{js_json(dict(directive.modifiers))}"
            entries.append(entry + "}")
        if not entries:
            return ""
        return "directives:[" + ",".join(entries) + "]"

    def gen_inline_template(self, el: ElementNode) -> str:
        children = el.children
        first = children[0] if children else None
        if len(children) != 1 or not isinstance(first, ElementNode):
            self.warn(
                "Inline-template components must have exactly one child element.",
                {"start": el.start},
                code=ErrorCode.INLINE_TEMPLATE_CHILDREN,
            )
        if not isinstance(first, ElementNode):
            return ""
        result = self.subcompile(first)
        static_fns = ",".join(f"function(){{{code}}}" for code in result.static_render_fns)
        return (
            f"inlineTemplate:{{render:function(){{{result.render}}},"
            f"staticRenderFns:[{static_fns}]}}"
        )
