"""Built-in directive plugins.

Base directives (available on every platform):

- ``v-on="object"``: merges an object of listeners via `wrap_listeners`
- ``v-bind="object"``: merges an object of bindings via `wrap_data`
- ``v-cloak``: compile-time no-op

Web platform directives:

- ``v-text``: becomes a ``textContent`` DOM property
- ``v-html``: becomes an ``innerHTML`` DOM property

None of them needs a runtime counterpart.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rendergen.exceptions import ErrorCode
from rendergen.nodes.helpers import add_prop
from rendergen.plugins.base import DirectivePlugin, WarnFunc

if TYPE_CHECKING:
    from rendergen.nodes.element import Directive, ElementNode


class OnDirective(DirectivePlugin):
    """``v-on="listeners"`` → ``_g(<data>,listeners)``."""

    __slots__ = ()

    def compile_directive(
        self, node: ElementNode, directive: Directive, warn: WarnFunc
    ) -> bool:
        if directive.modifiers:
            warn(
                "v-on without argument does not support modifiers.",
                directive,
                code=ErrorCode.ON_OBJECT_MODIFIERS,
            )
        helper = self.intrinsics.bind_object_listeners
        value = directive.value
        node.wrap_listeners = lambda code: f"{helper}({code},{value})"
        return False


class BindDirective(DirectivePlugin):
    """``v-bind="props"`` → ``_b(<data>,'tag',props,asProp[,isSync])``."""

    __slots__ = ()

    def compile_directive(
        self, node: ElementNode, directive: Directive, warn: WarnFunc
    ) -> bool:
        helper = self.intrinsics.bind_object_props
        modifiers = directive.modifiers or {}
        as_prop = "true" if modifiers.get("prop") else "false"
        sync = ",true" if modifiers.get("sync") else ""
        tag = node.tag
        value = directive.value
        node.wrap_data = lambda code: f"{helper}({code},'{tag}',{value},{as_prop}{sync})"
        return False


class CloakDirective(DirectivePlugin):
    __slots__ = ()

    def compile_directive(
        self, node: ElementNode, directive: Directive, warn: WarnFunc
    ) -> bool:
        return False


class _DomPropertyDirective(DirectivePlugin):
    __slots__ = ()

    prop_name = ""

    def compile_directive(
        self, node: ElementNode, directive: Directive, warn: WarnFunc
    ) -> bool:
        if directive.value:
            add_prop(
                node,
                self.prop_name,
                f"{self.intrinsics.to_string}({directive.value})",
                directive,
            )
        return False


class TextDirective(_DomPropertyDirective):
    """``v-text="msg"`` → ``domProps:{"textContent":_s(msg)}``."""

    __slots__ = ()
    prop_name = "textContent"


class HtmlDirective(_DomPropertyDirective):
    """``v-html="raw"`` → ``domProps:{"innerHTML":_s(raw)}``."""

    __slots__ = ()
    prop_name = "innerHTML"
