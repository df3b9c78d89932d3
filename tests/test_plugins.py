"""Tests for the built-in directive plugins and plugin adaptation."""

from __future__ import annotations

import pytest

from rendergen import Directive, Environment, ErrorCode, Intrinsics, PluginError, Tree
from rendergen.nodes import add_directive, add_handler
from rendergen.plugins import (
    FunctionDirective,
    ModelDirective,
    ModelPath,
    as_directive_plugin,
    gen_assignment_code,
    parse_model,
)
from rendergen.plugins.model import RANGE_TOKEN

from .helpers import body


class _Recorder:
    """Warn sink collecting (message, code) pairs."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ErrorCode | None]] = []

    def __call__(self, message, loc=None, tip=False, **kwargs) -> None:
        self.calls.append((message, kwargs.get("code")))

    @property
    def codes(self) -> list[ErrorCode | None]:
        return [code for _, code in self.calls]


def _model(value: str, **modifiers: bool) -> Directive:
    return Directive("model", "v-model", value, modifiers=modifiers or None)


class TestParseModel:
    """Splitting v-model targets."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("msg", ModelPath("msg", None)),
            ("  msg  ", ModelPath("msg", None)),
            ("form.name", ModelPath("form", '"name"')),
            ("a.b.c", ModelPath("a.b", '"c"')),
            ("rows[i]", ModelPath("rows", "i")),
            ("rows[i].name", ModelPath("rows[i]", '"name"')),
            ('xxx["test"][idx]', ModelPath('xxx["test"]', "idx")),
            ("a[b[c]]", ModelPath("a", "b[c]")),
            ("a['x]y']", ModelPath("a", "'x]y'")),
            ("fn('[').bar", ModelPath("fn('[')", '"bar"')),
            ("a[b", ModelPath("a[b", None)),
        ],
    )
    def test_paths(self, value: str, expected: ModelPath) -> None:
        assert parse_model(value) == expected

    def test_assignment_to_identifier(self) -> None:
        assert gen_assignment_code("msg", "$$v") == "msg=$$v"

    def test_assignment_to_member_uses_setter(self) -> None:
        assert gen_assignment_code("form.name", "$$v") == '$set(form, "name", $$v)'
        assert gen_assignment_code("rows[i]", "1") == "$set(rows, i, 1)"

    def test_custom_setter_name(self) -> None:
        code = gen_assignment_code("a.b", "1", Intrinsics(set="setReactive"))
        assert code == 'setReactive(a, "b", 1)'


class TestModelOnInputs:
    """Native form elements."""

    def test_text_input_full_output(self, compile_body, tree: Tree) -> None:
        node = tree.element("input", attrs={"v-model": "msg"})
        add_directive(node, "model", "v-model", "msg")
        assert compile_body(tree) == (
            "_c('input',{directives:[{name:\"model\",rawName:\"v-model\","
            "value:(msg),expression:\"msg\"}],"
            "domProps:{\"value\":(msg)},"
            "on:{\"input\":function($event){if($event.target.composing)return;"
            "msg=$event.target.value}}})"
        )

    def test_lazy_trim_number(self, tree: Tree) -> None:
        node = tree.element("input")
        keep = ModelDirective().compile_directive(
            node, _model("msg", lazy=True, trim=True, number=True), _Recorder()
        )
        assert keep is True
        assert list(node.events) == ["change", "blur"]
        assert node.events["change"][0].value == "msg=_n($event.target.value.trim())"
        assert node.events["blur"][0].value == "$forceUpdate()"

    def test_range_uses_normalized_event(self, tree: Tree) -> None:
        node = tree.element("input", attrs={"type": "range"})
        ModelDirective().compile_directive(node, _model("level"), _Recorder())
        assert list(node.events) == [RANGE_TOKEN]
        # No IME composition guard for sliders
        assert node.events[RANGE_TOKEN][0].value == "level=$event.target.value"

    def test_textarea(self, tree: Tree) -> None:
        node = tree.element("textarea")
        ModelDirective().compile_directive(node, _model("body"), _Recorder())
        assert [(p.name, p.value) for p in node.props] == [("value", "(body)")]

    def test_listener_runs_before_user_listeners(self, tree: Tree) -> None:
        node = tree.element("input")
        add_handler(node, "input", "onInput")
        ModelDirective().compile_directive(node, _model("msg"), _Recorder())
        assert [h.value for h in node.events["input"]][1] == "onInput"

    def test_value_binding_conflict_warns(self, tree: Tree) -> None:
        node = tree.element("input", attrs={":value": "other"})
        warn = _Recorder()
        ModelDirective().compile_directive(node, _model("msg"), warn)
        assert warn.codes == [ErrorCode.MODEL_UNSUPPORTED]
        assert warn.calls[0][0].startswith(':value="other" conflicts with v-model')

    def test_value_binding_with_type_binding_is_allowed(self, tree: Tree) -> None:
        node = tree.element("input", attrs={":value": "other", ":type": "kind"})
        warn = _Recorder()
        ModelDirective().compile_directive(node, _model("msg"), warn)
        assert warn.calls == []

    def test_file_input_warns(self, tree: Tree) -> None:
        node = tree.element("input", attrs={"type": "file"})
        warn = _Recorder()
        ModelDirective().compile_directive(node, _model("upload"), warn)
        assert warn.codes == [ErrorCode.MODEL_FILE_INPUT]

    def test_checkbox(self, tree: Tree) -> None:
        node = tree.element("input", attrs={"type": "checkbox"})
        ModelDirective().compile_directive(node, _model("checked"), _Recorder())
        assert [(p.name, p.value) for p in node.props] == [
            ("checked", "Array.isArray(checked)?_i(checked,null)>-1:(checked)")
        ]
        assert node.events["change"][0].value == (
            "var $$a=checked,$$el=$event.target,$$c=$$el.checked?(true):(false);"
            "if(Array.isArray($$a)){var $$v=null,$$i=_i($$a,$$v);"
            "if($$el.checked){$$i<0&&(checked=$$a.concat([$$v]))}"
            "else{$$i>-1&&(checked=$$a.slice(0,$$i).concat($$a.slice($$i+1)))}}"
            "else{checked=$$c}"
        )

    def test_checkbox_custom_true_value(self, tree: Tree) -> None:
        node = tree.element(
            "input",
            attrs={"type": "checkbox", "value": "x", ":true-value": "yes", "false-value": "no"},
        )
        ModelDirective().compile_directive(node, _model("pick", number=True), _Recorder())
        assert node.props[0].value == 'Array.isArray(pick)?_i(pick,"x")>-1:_q(pick,yes)'
        handler = node.events["change"][0].value
        assert '$$c=$$el.checked?(yes):("no");' in handler
        assert 'var $$v=_n("x")' in handler
        # Consumed bindings leave the raw attribute list
        assert [a.name for a in node.attrs_list] == ["type"]

    def test_radio(self, tree: Tree) -> None:
        node = tree.element("input", attrs={"type": "radio", "value": "a"})
        ModelDirective().compile_directive(node, _model("pick"), _Recorder())
        assert [(p.name, p.value) for p in node.props] == [("checked", '_q(pick,"a")')]
        assert node.events["change"][0].value == 'pick="a"'

    def test_radio_number(self, tree: Tree) -> None:
        node = tree.element("input", attrs={"type": "radio", ":value": "n"})
        ModelDirective().compile_directive(node, _model("pick", number=True), _Recorder())
        assert node.props[0].value == "_q(pick,_n(n))"
        assert node.events["change"][0].value == "pick=_n(n)"

    def test_select(self, tree: Tree) -> None:
        node = tree.element("select")
        ModelDirective().compile_directive(node, _model("form.choice"), _Recorder())
        assert node.events["change"][0].value == (
            "var $$selectedVal = Array.prototype.filter"
            ".call($event.target.options,function(o){return o.selected})"
            '.map(function(o){var val = "_value" in o ? o._value : o.value;return val}); '
            '$set(form, "choice", $event.target.multiple ? $$selectedVal : $$selectedVal[0])'
        )
        assert node.props is None

    def test_unsupported_element_warns(self, tree: Tree) -> None:
        node = tree.element("div")
        warn = _Recorder()
        keep = ModelDirective().compile_directive(node, _model("msg"), warn)
        assert keep is True
        assert warn.codes == [ErrorCode.MODEL_UNSUPPORTED]
        assert node.events is None


class TestModelOnComponents:
    """Component v-model becomes a model descriptor."""

    def test_component_output(self, compile_body, tree: Tree) -> None:
        node = tree.element("my-input")
        add_directive(node, "model", "v-model", "msg")
        assert compile_body(tree) == (
            "_c('my-input',{model:{value:(msg),"
            "callback:function ($$v) {msg=$$v},expression:\"msg\"}})"
        )

    def test_trim_and_number(self, tree: Tree) -> None:
        node = tree.element("my-input")
        keep = ModelDirective().compile_directive(
            node, _model("form.age", trim=True, number=True), _Recorder()
        )
        assert keep is False
        assert node.model.callback == (
            "function ($$v) {$set(form, \"age\", "
            "_n((typeof $$v === 'string'? $$v.trim(): $$v)))}"
        )
        assert node.model.expression == '"form.age"'

    def test_dynamic_component(self, tree: Tree) -> None:
        node = tree.element("component", component="view")
        ModelDirective().compile_directive(node, _model("msg"), _Recorder())
        assert node.model.value == "(msg)"

    def test_custom_reserved_predicate(self, tree: Tree) -> None:
        node = tree.element("view")
        plugin = ModelDirective(is_reserved_tag=lambda tag: tag == "view")
        warn = _Recorder()
        plugin.compile_directive(node, _model("msg"), warn)
        assert node.model is None
        assert warn.codes == [ErrorCode.MODEL_UNSUPPORTED]


class TestDomPropertyDirectives:
    """v-text and v-html."""

    def test_text(self, compile_body, tree: Tree) -> None:
        node = tree.element("span")
        add_directive(node, "text", "v-text", "msg")
        assert compile_body(tree) == "_c('span',{domProps:{\"textContent\":_s(msg)}})"

    def test_html(self, compile_body, tree: Tree) -> None:
        node = tree.element("div")
        add_directive(node, "html", "v-html", "raw")
        assert compile_body(tree) == "_c('div',{domProps:{\"innerHTML\":_s(raw)}})"

    def test_empty_value_adds_nothing(self, compile_body, tree: Tree) -> None:
        node = tree.element("div")
        add_directive(node, "html", "v-html")
        assert compile_body(tree) == "_c('div',{})"

    def test_custom_to_string_name(self, tree: Tree) -> None:
        node = tree.element("span")
        add_directive(node, "text", "v-text", "msg")
        env = Environment(intrinsics=Intrinsics(to_string="toStr"))
        assert body(env.compile(tree).render) == (
            "_c('span',{domProps:{\"textContent\":toStr(msg)}})"
        )


class TestRecompile:
    """Directive plugins leave the compiled tree reusable."""

    def test_text_input_twice(self, env: Environment, tree: Tree) -> None:
        div = tree.element("div")
        node = tree.element("input", div, attrs={"v-model": "msg"})
        add_directive(node, "model", "v-model", "msg")
        first = env.compile(tree).render
        second = env.compile(tree).render
        assert second == first
        assert first.count('"value":(msg)') == 1
        assert node.props is None
        assert node.events is None

    def test_checkbox_keeps_value_attribute(self, env: Environment, tree: Tree) -> None:
        node = tree.element("input", attrs={"type": "checkbox", ":value": "item"})
        add_directive(node, "model", "v-model", "picked")
        first = env.compile(tree).render
        assert env.compile(tree).render == first
        assert [a.name for a in node.attrs_list] == ["type", ":value"]

    def test_component_model_twice(self, env: Environment, tree: Tree) -> None:
        node = tree.element("my-input")
        add_directive(node, "model", "v-model", "msg")
        first = env.compile(tree).render
        assert env.compile(tree).render == first
        assert node.model is None

    def test_existing_listeners_survive(self, env: Environment, tree: Tree) -> None:
        node = tree.element("textarea", attrs={"v-model": "body"})
        add_handler(node, "input", "onInput")
        add_directive(node, "model", "v-model", "body")
        first = env.compile(tree).render
        assert env.compile(tree).render == first
        assert [h.value for h in node.events["input"]] == ["onInput"]

    def test_object_bindings_twice(self, env: Environment, tree: Tree) -> None:
        node = tree.element("div")
        add_directive(node, "bind", "v-bind", "props")
        add_directive(node, "text", "v-text", "msg")
        first = env.compile(tree).render
        assert env.compile(tree).render == first
        assert node.wrap_data is None
        assert node.props is None


class TestPluginAdaptation:
    """Plain callables and duck-typed plugins."""

    def test_function_is_wrapped(self) -> None:
        def focus(node, directive, warn):
            return True

        plugin = as_directive_plugin(focus)
        assert isinstance(plugin, FunctionDirective)
        assert repr(plugin) == "FunctionDirective('focus')"

    def test_function_result_is_coerced(self, tree: Tree) -> None:
        plugin = FunctionDirective(lambda node, directive, warn: None)
        node = tree.element("div")
        assert plugin.compile_directive(node, Directive("x", "v-x"), _Recorder()) is False

    def test_duck_typed_plugin_is_kept(self) -> None:
        class Custom:
            def compile_directive(self, node, directive, warn):
                return False

        custom = Custom()
        assert as_directive_plugin(custom) is custom

    def test_plugin_instance_is_kept(self) -> None:
        plugin = ModelDirective()
        assert as_directive_plugin(plugin) is plugin

    def test_non_callable_is_rejected(self) -> None:
        with pytest.raises(PluginError, match="must be callable, got int"):
            as_directive_plugin(42)

    def test_function_plugin_can_rewrite_the_element(self, tree: Tree) -> None:
        def uppercase(node, directive, warn):
            node.class_binding = f"{directive.value}.toUpperCase()"
            return False

        node = tree.element("div")
        add_directive(node, "upper", "v-upper", "cls")
        env = Environment(extra_directives={"upper": uppercase})
        assert body(env.compile(tree).render) == "_c('div',{class:cls.toUpperCase()})"
