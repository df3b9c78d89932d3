"""Per-attribute codegen modules for the web platform."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rendergen.plugins.base import CompilerModule

if TYPE_CHECKING:
    from rendergen.nodes.element import ElementNode


class ClassModule(CompilerModule):
    """``class="a b"`` and ``:class="expr"``."""

    static_keys = ("static_class",)

    def generate_module_data(self, node: ElementNode) -> str:
        data = ""
        if node.static_class:
            data += f"staticClass:{node.static_class},"
        if node.class_binding:
            data += f"class:{node.class_binding},"
        return data


class StyleModule(CompilerModule):
    """``style="..."`` (pre-parsed to a JSON object) and ``:style="expr"``."""

    static_keys = ("static_style",)

    def generate_module_data(self, node: ElementNode) -> str:
        data = ""
        if node.static_style:
            data += f"staticStyle:{node.static_style},"
        if node.style_binding:
            data += f"style:({node.style_binding}),"
        return data
