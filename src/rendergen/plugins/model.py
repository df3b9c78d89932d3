"""``v-model`` directive plugin.

Expands two-way bindings into a value binding plus a listener:

==========================  =============================================
Element                     Expansion
==========================  =============================================
component                   ``model:{value,callback,expression}``
``<select>``                ``change`` listener collecting selected options
``<input type=checkbox>``   ``checked`` prop + array-aware ``change``
``<input type=radio>``      ``checked`` prop + ``change``
``<input>``/``<textarea>``  ``value`` prop + ``input`` (or ``change``)
==========================  =============================================

Assignments to member paths (``form.name``, ``rows[i]``) go through the
runtime's reactive setter so new keys stay reactive.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rendergen.exceptions import ErrorCode
from rendergen.intrinsics import DEFAULT_INTRINSICS, Intrinsics
from rendergen.nodes.element import ModelBinding
from rendergen.nodes.helpers import add_handler, add_prop, get_binding_attr
from rendergen.plugins.base import DirectivePlugin, WarnFunc
from rendergen.utils.code import js_string
from rendergen.utils.constants import is_reserved_tag

if TYPE_CHECKING:
    from rendergen.nodes.element import Directive, ElementNode

# Event name the runtime normalizes to input/change for range inputs
RANGE_TOKEN = "__r"


@dataclass(frozen=True, slots=True)
class ModelPath:
    """A v-model target split into object expression and key.

    ``key`` is None when the target is a plain identifier.
    """

    exp: str
    key: str | None


def parse_model(value: str) -> ModelPath:
    """Split a v-model target into object expression and key.

    Examples:
        >>> parse_model("test")
        ModelPath(exp='test', key=None)
        >>> parse_model("test.xxx.a")
        ModelPath(exp='test.xxx', key='"a"')
        >>> parse_model("test[idx]")
        ModelPath(exp='test', key='idx')
        >>> parse_model('xxx["test"][idx]')
        ModelPath(exp='xxx["test"]', key='idx')
    """
    value = value.strip()
    length = len(value)

    if "[" not in value or value.rfind("]") < length - 1:
        dot = value.rfind(".")
        if dot > -1:
            return ModelPath(value[:dot], '"' + value[dot + 1 :] + '"')
        return ModelPath(value, None)

    index = 0
    expression_pos = expression_end_pos = 0

    def skip_string(quote: str) -> None:
        nonlocal index
        while index < length:
            index += 1
            if index < length and value[index] == quote:
                break

    # The first character can never open a bracket or a string
    while index < length:
        index += 1
        if index >= length:
            break
        char = value[index]
        if char in "\"'":
            skip_string(char)
        elif char == "[":
            depth = 1
            expression_pos = index
            while index < length:
                index += 1
                if index >= length:
                    break
                char = value[index]
                if char in "\"'":
                    skip_string(char)
                    continue
                if char == "[":
                    depth += 1
                elif char == "]":
                    depth -= 1
                if depth == 0:
                    expression_end_pos = index
                    break

    return ModelPath(value[:expression_pos], value[expression_pos + 1 : expression_end_pos])


def gen_assignment_code(value: str, assignment: str, intrinsics: Intrinsics = DEFAULT_INTRINSICS) -> str:
    """Code assigning ``assignment`` to the v-model target ``value``."""
    path = parse_model(value)
    if path.key is None:
        return f"{value}={assignment}"
    return f"{intrinsics.set}({path.exp}, {path.key}, {assignment})"


class ModelDirective(DirectivePlugin):
    """Web platform ``v-model``."""

    __slots__ = ("is_reserved_tag",)

    def __init__(
        self,
        intrinsics: Intrinsics = DEFAULT_INTRINSICS,
        is_reserved_tag: Callable[[str], bool] = is_reserved_tag,
    ) -> None:
        super().__init__(intrinsics)
        self.is_reserved_tag = is_reserved_tag

    def compile_directive(
        self, node: ElementNode, directive: Directive, warn: WarnFunc
    ) -> bool:
        value = directive.value or ""
        modifiers = directive.modifiers or {}
        tag = node.tag
        input_type = node.attrs_map.get("type")

        if tag == "input" and input_type == "file":
            warn(
                f'<{tag} v-model="{value}" type="file">:\n'
                "File inputs are read only. Use a v-on:change listener instead.",
                node.raw_attrs_map.get("v-model"),
                code=ErrorCode.MODEL_FILE_INPUT,
            )

        if node.component:
            self.gen_component_model(node, value, modifiers)
            # Component v-model needs no runtime directive
            return False
        if tag == "select":
            self._gen_select(node, value, modifiers)
        elif tag == "input" and input_type == "checkbox":
            self._gen_checkbox(node, value, modifiers)
        elif tag == "input" and input_type == "radio":
            self._gen_radio(node, value, modifiers)
        elif tag in ("input", "textarea"):
            self._gen_default(node, value, modifiers, warn)
        elif not self.is_reserved_tag(tag):
            self.gen_component_model(node, value, modifiers)
            return False
        else:
            warn(
                f'<{tag} v-model="{value}">: v-model is not supported on this element type. '
                "If you are working with contenteditable, it's recommended to wrap a "
                "library dedicated for that purpose inside a custom component.",
                node.raw_attrs_map.get("v-model"),
                code=ErrorCode.MODEL_UNSUPPORTED,
            )
        # Native elements keep the runtime directive (IME composition, select sync)
        return True

    def gen_component_model(self, node: ElementNode, value: str, modifiers: dict) -> None:
        base = "$$v"
        value_expression = base
        if modifiers.get("trim"):
            value_expression = f"(typeof {base} === 'string'? {base}.trim(): {base})"
        if modifiers.get("number"):
            value_expression = f"{self.intrinsics.to_number}({value_expression})"
        assignment = gen_assignment_code(value, value_expression, self.intrinsics)
        node.model = ModelBinding(
            value=f"({value})",
            expression=js_string(value),
            callback=f"function ({base}) {{{assignment}}}",
        )

    def _gen_checkbox(self, node: ElementNode, value: str, modifiers: dict) -> None:
        i = self.intrinsics
        value_binding = get_binding_attr(node, "value") or "null"
        true_binding = get_binding_attr(node, "true-value") or "true"
        false_binding = get_binding_attr(node, "false-value") or "false"
        checked = (
            f"Array.isArray({value})?{i.loose_index_of}({value},{value_binding})>-1"
            + (f":({value})" if true_binding == "true" else f":{i.loose_equal}({value},{true_binding})")
        )
        add_prop(node, "checked", checked)
        item = f"{i.to_number}({value_binding})" if modifiers.get("number") else value_binding
        add_handler(
            node,
            "change",
            f"var $$a={value},$$el=$event.target,"
            f"$$c=$$el.checked?({true_binding}):({false_binding});"
            "if(Array.isArray($$a)){"
            f"var $$v={item},$$i={i.loose_index_of}($$a,$$v);"
            f"if($$el.checked){{$$i<0&&({gen_assignment_code(value, '$$a.concat([$$v])', i)})}}"
            f"else{{$$i>-1&&({gen_assignment_code(value, '$$a.slice(0,$$i).concat($$a.slice($$i+1))', i)})}}"
            f"}}else{{{gen_assignment_code(value, '$$c', i)}}}",
            None,
            True,
            prepend_helper=i.prepend_modifier,
        )

    def _gen_radio(self, node: ElementNode, value: str, modifiers: dict) -> None:
        i = self.intrinsics
        value_binding = get_binding_attr(node, "value") or "null"
        if modifiers.get("number"):
            value_binding = f"{i.to_number}({value_binding})"
        add_prop(node, "checked", f"{i.loose_equal}({value},{value_binding})")
        add_handler(
            node,
            "change",
            gen_assignment_code(value, value_binding, i),
            None,
            True,
            prepend_helper=i.prepend_modifier,
        )

    def _gen_select(self, node: ElementNode, value: str, modifiers: dict) -> None:
        i = self.intrinsics
        picked = f"{i.to_number}(val)" if modifiers.get("number") else "val"
        selected = (
            "Array.prototype.filter"
            ".call($event.target.options,function(o){return o.selected})"
            '.map(function(o){var val = "_value" in o ? o._value : o.value;'
            f"return {picked}}})"
        )
        assignment = "$event.target.multiple ? $$selectedVal : $$selectedVal[0]"
        code = f"var $$selectedVal = {selected}; {gen_assignment_code(value, assignment, i)}"
        add_handler(node, "change", code, None, True, prepend_helper=i.prepend_modifier)

    def _gen_default(
        self, node: ElementNode, value: str, modifiers: dict, warn: WarnFunc
    ) -> None:
        i = self.intrinsics
        input_type = node.attrs_map.get("type")

        bound_value = node.attrs_map.get("v-bind:value") or node.attrs_map.get(":value")
        type_binding = node.attrs_map.get("v-bind:type") or node.attrs_map.get(":type")
        if bound_value and not type_binding:
            binding = "v-bind:value" if node.attrs_map.get("v-bind:value") else ":value"
            warn(
                f'{binding}="{bound_value}" conflicts with v-model on the same element '
                "because the latter already expands to a value binding internally",
                node.raw_attrs_map.get(binding),
                code=ErrorCode.MODEL_UNSUPPORTED,
            )

        lazy = modifiers.get("lazy")
        number = modifiers.get("number")
        trim = modifiers.get("trim")
        needs_composition_guard = not lazy and input_type != "range"
        if lazy:
            event = "change"
        elif input_type == "range":
            event = RANGE_TOKEN
        else:
            event = "input"

        value_expression = "$event.target.value.trim()" if trim else "$event.target.value"
        if number:
            value_expression = f"{i.to_number}({value_expression})"
        code = gen_assignment_code(value, value_expression, i)
        if needs_composition_guard:
            code = f"if($event.target.composing)return;{code}"

        add_prop(node, "value", f"({value})")
        add_handler(node, event, code, None, True, prepend_helper=i.prepend_modifier)
        if trim or number:
            add_handler(node, "blur", f"{i.force_update}()", prepend_helper=i.prepend_modifier)
